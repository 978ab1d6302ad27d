"""
Note Assistant - the note-taking actions a user can trigger.

Validates input before any backend call, picks the streaming mode for each
operation, and keeps the status line informed. Every backend failure ends
in a status change; none is silently dropped.
"""

import re

from notestream.config import NotesConfig, StatusConfig
from notestream.core.devices.camera import CameraSession
from notestream.core.devices.recorder import VoiceRecorder
from notestream.core.document_store.document_store import DocumentStore
from notestream.core.llm.base import wrap_backend_error
from notestream.core.status.status_reporter import StatusReporter
from notestream.models.media import AudioRecording, CapturedFrame
from notestream.models.note import Note
from notestream.models.session import GenerationRequest, RequestKind, StreamMode, StreamOutcome
from notestream.services.streaming_controller import StreamingAppendController
from notestream.utils.exceptions import (
    BillingRequiredError,
    DevicePermissionError,
    NoteStreamError,
    ValidationError,
)
from notestream.utils.logger import get_logger

logger = get_logger(__name__)

# Status messages
THINKING = "Thinking..."
NOTE_SAVED = "Note saved!"
EMPTY_NOTE = "An empty note cannot be summarized."
SUMMARY_DONE = "Summarized!"
SUMMARY_FAILED = "Error while summarizing."
EMPTY_QUESTION = "Type a question first."
ANSWER_DONE = "Answer added!"
ANSWER_FAILED = "Sorry, no answer this time."
RECORDING = "Recording... listening."
MIC_DENIED = "Microphone access was denied."
PROCESSING_VOICE = "Processing voice note..."
NO_AUDIO = "No audio was recorded."
VOICE_DONE = "Voice note summarized!"
VOICE_FAILED = "Failed to summarize the voice note."
CAMERA_DENIED = "Camera access was denied."
ANALYSING_IMAGE = "Analysing image..."
IMAGE_ANALYSED = "Image analysed!"
IMAGE_ANALYSIS_FAILED = "Sorry, the image could not be analysed."
EMPTY_IMAGE_PROMPT = "Describe the image you want first."
GENERATING_IMAGE = "Generating image..."
IMAGE_DONE = "Image ready!"
IMAGE_BILLING_REQUIRED = "Failed: this feature requires an account with billing enabled."
IMAGE_FAILED = "Failed to generate image, try again later."


class NoteAssistant:
    """
    User-facing note operations on top of the streaming controller.

    Operations default to the active note when no id is given; the id is
    resolved once, before any await, and never re-read afterwards.
    """

    def __init__(
        self,
        store: DocumentStore,
        controller: StreamingAppendController,
        status: StatusReporter,
        notes_config: NotesConfig | None = None,
        status_config: StatusConfig | None = None,
    ):
        """
        Initialize the assistant.

        Args:
            store: Document store holding the notes
            controller: Streaming controller bound to the same store
            status: Status line shared with the controller
            notes_config: Separators, headings and defaults
            status_config: Status durations
        """
        self.store = store
        self.controller = controller
        self.status = status
        self.notes_config = notes_config or NotesConfig()
        self.status_config = status_config or StatusConfig()
        self._image_jobs = 0

    @property
    def busy(self) -> bool:
        return self.controller.busy or self._image_jobs > 0

    def _target(self, note_id: str | None) -> Note:
        """Resolve the target note: explicit id, else the active note."""
        return self.store.require(note_id or self.store.active_id)

    def _reject(self, message: str, duration_ms: int | None = None) -> ValidationError:
        self.status.report(message, duration_ms or self.status_config.default_duration_ms)
        return ValidationError(message)

    # Editing

    def save(self, note_id: str | None = None, title: str | None = None, content: str | None = None) -> Note:
        """Persist edits from the editor onto a note."""
        note = self._target(note_id)
        patch = {}
        if title is not None:
            patch["title"] = title
        if content is not None:
            patch["content"] = content
        updated = self.store.update(note.id, **patch)
        self.status.report(NOTE_SAVED, self.status_config.saved_duration_ms)
        return updated

    # Streaming operations

    async def summarize(self, note_id: str | None = None, text: str | None = None) -> StreamOutcome:
        """
        Replace a note's body with an AI summary of it.

        Args:
            note_id: Target note (defaults to the active note)
            text: Unsaved editor text to summarize; saved onto the note first
                  so a failed summary restores it

        Raises:
            ValidationError: If there is nothing to summarize
        """
        note = self._target(note_id)
        if text is not None and text != note.content:
            note = self.store.update(note.id, content=text)
        if note.is_empty():
            raise self._reject(EMPTY_NOTE)

        return await self.controller.run_stream(
            note.id,
            GenerationRequest(kind=RequestKind.SUMMARIZE, text=note.content),
            StreamMode.REPLACE,
            working_status=THINKING,
            success_status=SUMMARY_DONE,
            failure_status=SUMMARY_FAILED,
        )

    async def ask(self, question: str, note_id: str | None = None) -> StreamOutcome:
        """
        Append an AI answer to a free-form question below the note body.

        Raises:
            ValidationError: If the question is blank
        """
        if not question or not question.strip():
            raise self._reject(EMPTY_QUESTION, self.status_config.saved_duration_ms)
        note = self._target(note_id)

        return await self.controller.run_stream(
            note.id,
            GenerationRequest(kind=RequestKind.ASK, text=question),
            StreamMode.APPEND,
            prefix=self.notes_config.answer_separator,
            working_status=THINKING,
            success_status=ANSWER_DONE,
            failure_status=ANSWER_FAILED,
        )

    async def start_voice_note(self, recorder: VoiceRecorder) -> None:
        """
        Start recording a voice note.

        Raises:
            DevicePermissionError: If microphone access is denied
        """
        try:
            await recorder.start()
        except DevicePermissionError:
            self.status.report(MIC_DENIED)
            raise
        self.status.report(RECORDING)

    async def finish_voice_note(
        self, recorder: VoiceRecorder, note_id: str | None = None
    ) -> StreamOutcome:
        """Stop the recorder and append a summary of the recording to a note."""
        target_id = self._target(note_id).id
        recording = await recorder.stop()
        return await self.summarize_voice_note(recording, note_id=target_id)

    async def summarize_voice_note(
        self, recording: AudioRecording, note_id: str | None = None
    ) -> StreamOutcome:
        """
        Append a summary of a voice recording to a note.

        Raises:
            ValidationError: If the recording is empty
        """
        note = self._target(note_id)
        if recording.is_empty():
            raise self._reject(NO_AUDIO)

        prefix = (self.notes_config.answer_separator if note.content else "") + (
            self.notes_config.voice_note_heading
        )
        return await self.controller.run_stream(
            note.id,
            GenerationRequest(kind=RequestKind.SUMMARIZE_AUDIO, media=recording),
            StreamMode.APPEND,
            prefix=prefix,
            working_status=PROCESSING_VOICE,
            success_status=VOICE_DONE,
            failure_status=VOICE_FAILED,
        )

    # Camera

    async def open_camera(self, camera: CameraSession) -> None:
        """
        Open the camera for a capture.

        Raises:
            DevicePermissionError: If camera access is denied
        """
        try:
            await camera.open()
        except DevicePermissionError:
            self.status.report(CAMERA_DENIED)
            raise

    async def describe_image(self, frame: CapturedFrame, prompt: str | None = None, on_chunk=None) -> str:
        """
        Ask the backend about a captured frame.

        The answer is streamed into a scratch buffer, not into a note.

        Returns:
            The description, or a fallback apology if the backend failed
        """
        prompt = prompt or self.notes_config.default_image_prompt
        self.status.set(ANALYSING_IMAGE)
        try:
            description = await self.controller.stream_text(
                GenerationRequest(kind=RequestKind.DESCRIBE_IMAGE, text=prompt, media=frame),
                on_chunk=on_chunk,
            )
        except NoteStreamError as e:
            logger.bind(error_type=type(e).__name__).error("Image description failed: {}", e)
            self.status.report(IMAGE_ANALYSIS_FAILED)
            return IMAGE_ANALYSIS_FAILED
        self.status.report(IMAGE_ANALYSED)
        return description

    def insert_captured_image(
        self, frame: CapturedFrame, description: str | None = None, note_id: str | None = None
    ) -> Note:
        """Append a captured frame (and the AI answer about it) to a note."""
        snippet = f"![Captured image]({frame.data_url})"
        if description:
            snippet += f"\n\nAI answer:\n{description}"
        return self._append_snippet(self._target(note_id), snippet)

    # Image generation

    async def generate_image(self, prompt: str) -> str:
        """
        Generate an image from a prompt.

        Returns:
            Base64-encoded PNG

        Raises:
            ValidationError: If the prompt is blank
            BillingRequiredError: If the account is not entitled to image generation
            LLMError: If generation failed for any other reason
        """
        if not prompt or not prompt.strip():
            raise self._reject(EMPTY_IMAGE_PROMPT, self.status_config.saved_duration_ms)

        self._image_jobs += 1
        self.status.set(GENERATING_IMAGE)
        try:
            image_b64 = await self.controller.backend.generate_image(prompt)
        except Exception as e:
            error = e if isinstance(e, NoteStreamError) else wrap_backend_error(e, "Backend")
            if isinstance(error, BillingRequiredError):
                self.status.report(IMAGE_BILLING_REQUIRED, self.status_config.billing_duration_ms)
            else:
                self.status.report(IMAGE_FAILED, self.status_config.default_duration_ms)
            logger.bind(error_type=type(error).__name__).error("Image generation failed: {}", error)
            if error is e:
                raise
            raise error from e
        finally:
            self._image_jobs -= 1

        self.status.report(IMAGE_DONE, self.status_config.default_duration_ms)
        return image_b64

    async def attach_generated_image(self, prompt: str, note_id: str | None = None) -> Note:
        """Generate an image and attach it to a note's image list."""
        target_id = self._target(note_id).id
        image_b64 = await self.generate_image(prompt)
        note = self.store.append_image(target_id, image_b64)
        if note is None:
            logger.bind(note_id=target_id).warning("Note {} removed before its image was ready", target_id)
            return self.store.active_note
        return note

    def insert_generated_image(self, prompt: str, image_b64: str, note_id: str | None = None) -> Note:
        """Append a generated image to a note body as markdown."""
        snippet = f"![AI image: {prompt}](data:image/png;base64,{image_b64})"
        return self._append_snippet(self._target(note_id), snippet)

    @staticmethod
    def image_filename(prompt: str) -> str:
        """Download filename for a generated image."""
        slug = re.sub(r"[^a-z0-9\s]", "", prompt.lower())
        slug = re.sub(r"\s+", "-", slug)[:50]
        return f"notestream-{slug or 'image'}.png"

    def _append_snippet(self, note: Note, snippet: str) -> Note:
        separator = self.notes_config.answer_separator if note.content else ""
        return self.store.update(note.id, content=note.content + separator + snippet)
