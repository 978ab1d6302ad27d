"""
Streaming Append Controller.

Drives one generation request against the backend and folds each streamed
chunk into the note captured when the session started:

- REPLACE sessions clear the note first and restore the original body if
  the backend fails, discarding any partial output.
- APPEND sessions append a prefix first and keep whatever partial output
  arrived if the backend fails.

The target id is never re-resolved from the active selection, so a session
keeps writing the right note after the user navigates away. There is no
cancellation: late chunks still land on the target. At most one session may
write a given note at a time; a second one is rejected.
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from functools import reduce

from notestream.core.document_store.document_store import DocumentStore
from notestream.core.llm.base import GenerativeBackend
from notestream.core.status.status_reporter import StatusReporter
from notestream.models.session import (
    GenerationRequest,
    SessionStatus,
    StreamMode,
    StreamOutcome,
    StreamSession,
)
from notestream.utils.exceptions import ConfigurationError, SessionConflictError
from notestream.utils.id_generator import generate_session_id
from notestream.utils.logger import get_logger

logger = get_logger(__name__)


def fold_chunk(content: str, chunk: str) -> str:
    """Append one chunk to the current content."""
    return content + chunk


def fold_chunks(content: str, chunks: Iterable[str]) -> str:
    """Fold a whole chunk sequence onto a starting content, in order."""
    return reduce(fold_chunk, chunks, content)


class StreamingAppendController:
    """
    Applies streamed backend output to notes in the document store.

    The `busy` flag is advisory: callers use it to disable triggers while a
    session is running, but sessions against different notes may overlap.
    """

    def __init__(
        self,
        backend: GenerativeBackend,
        store: DocumentStore,
        status: StatusReporter,
        status_duration_ms: int = 3000,
    ):
        """
        Initialize the controller.

        Args:
            backend: Generative backend producing chunk streams
            store: Document store holding the target notes
            status: Status line updated when sessions start and end
            status_duration_ms: How long completion/failure statuses stay visible
        """
        self.backend = backend
        self.store = store
        self.status = status
        self.status_duration_ms = status_duration_ms
        self._in_flight: dict[str, StreamSession] = {}

    @property
    def busy(self) -> bool:
        return bool(self._in_flight)

    def is_streaming(self, target_id: str) -> bool:
        return target_id in self._in_flight

    def active_sessions(self) -> list[StreamSession]:
        return list(self._in_flight.values())

    async def run_stream(
        self,
        target_id: str,
        request: GenerationRequest,
        mode: StreamMode,
        prefix: str = "",
        working_status: str = "Thinking...",
        success_status: str = "Done!",
        failure_status: str = "Generation failed.",
    ) -> StreamOutcome:
        """
        Run one streaming session against a note.

        Backend failures never propagate: they are turned into a failed
        outcome, a failure status, and a rollback (REPLACE) or a kept
        partial body (APPEND).

        Args:
            target_id: Note id, fixed for the whole session
            request: Operation descriptor sent to the backend
            mode: REPLACE or APPEND
            prefix: Text appended before the first chunk in APPEND mode
            working_status: Status shown while streaming
            success_status: Status reported on completion
            failure_status: Status reported on backend failure

        Returns:
            StreamOutcome describing the session

        Raises:
            SessionConflictError: If a session is already writing this note
            NotFoundError: If the note doesn't exist when the session starts
        """
        if target_id in self._in_flight:
            raise SessionConflictError(
                f"A streaming session is already writing note {target_id}",
                context={"note_id": target_id, "session_id": self._in_flight[target_id].id},
            )
        note = self.store.require(target_id)

        session = StreamSession(
            id=generate_session_id(),
            target_id=target_id,
            mode=mode,
            prefix=prefix if mode == StreamMode.APPEND else "",
            original_content=note.content,
        )
        self._in_flight[target_id] = session
        self.status.set(working_status)
        logger.bind(
            session_id=session.id,
            note_id=target_id,
            mode=mode.value,
            kind=request.kind.value,
        ).info("Streaming session started: {}", session.id)

        try:
            self._begin(session)
            async for chunk in self.backend.stream(request):
                self._apply(session, chunk)
        except Exception as e:
            return self._fail(session, e, failure_status)
        finally:
            self._in_flight.pop(target_id, None)

        return self._succeed(session, success_status)

    async def stream_text(
        self,
        request: GenerationRequest,
        on_chunk: Callable[[str], None] | None = None,
    ) -> str:
        """
        Stream a request into a scratch accumulator instead of a note.

        Args:
            request: Operation descriptor
            on_chunk: Optional callback receiving each chunk as it arrives

        Returns:
            All chunks joined in arrival order

        Raises:
            LLMError: If the backend fails
        """
        text = ""
        async for chunk in self.backend.stream(request):
            if not chunk:
                continue
            text = fold_chunk(text, chunk)
            if on_chunk is not None:
                on_chunk(chunk)
        return text

    def _begin(self, session: StreamSession) -> None:
        if session.mode == StreamMode.REPLACE:
            self.store.update(session.target_id, content="")
        elif session.prefix:
            self._append(session.target_id, session.prefix)

    def _apply(self, session: StreamSession, chunk: str | None) -> None:
        if not chunk:
            return
        self._append(session.target_id, chunk)
        session.accumulator = fold_chunk(session.accumulator, chunk)
        session.chunks_applied += 1

    def _append(self, target_id: str, text: str) -> None:
        note = self.store.get(target_id)
        if note is None:
            # Target removed mid-stream; nothing left to write into
            return
        self.store.update(target_id, content=fold_chunk(note.content, text))

    def _succeed(self, session: StreamSession, success_status: str) -> StreamOutcome:
        session.status = SessionStatus.SUCCEEDED
        session.finished_at = datetime.now()
        self.status.report(success_status, self.status_duration_ms)
        logger.bind(
            session_id=session.id,
            note_id=session.target_id,
            chunks=session.chunks_applied,
        ).info("Streaming session completed: {}", session.id)
        return self._outcome(session, succeeded=True)

    def _fail(self, session: StreamSession, error: Exception, failure_status: str) -> StreamOutcome:
        session.status = SessionStatus.FAILED
        session.finished_at = datetime.now()
        session.error = str(error)

        if session.mode == StreamMode.REPLACE:
            self.store.update(session.target_id, content=session.original_content)

        if isinstance(error, ConfigurationError):
            failure_status = error.message
        self.status.report(failure_status, self.status_duration_ms)
        logger.bind(
            session_id=session.id,
            note_id=session.target_id,
            mode=session.mode.value,
            chunks=session.chunks_applied,
            error_type=type(error).__name__,
        ).error("Streaming session failed: {}: {}", session.id, error)
        return self._outcome(session, succeeded=False)

    def _outcome(self, session: StreamSession, succeeded: bool) -> StreamOutcome:
        note = self.store.get(session.target_id)
        return StreamOutcome(
            session_id=session.id,
            target_id=session.target_id,
            succeeded=succeeded,
            content=note.content if note else None,
            generated_text=session.accumulator,
            chunks_applied=session.chunks_applied,
            error=session.error,
        )
