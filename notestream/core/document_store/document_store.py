"""
Document store holding the single source of truth for notes.

The store owns one NoteState snapshot at a time and swaps it atomically on
every mutation. All mutating methods settle the snapshot, so callers never
observe an empty collection or a dangling selection.
"""

from collections.abc import Iterable

from notestream.core.document_store.state import (
    NoteState,
    create_note,
    remove_note,
    select_note,
    settle,
    update_note,
)
from notestream.models.note import Note
from notestream.utils.exceptions import NotFoundError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentStore:
    """
    Owning holder for the note collection and active selection.

    Readers may keep the snapshot returned by `snapshot()`; later
    mutations never alter it.
    """

    def __init__(self, default_title: str = "", notes: Iterable[Note] | None = None):
        """
        Initialize the store.

        Args:
            default_title: Title given to notes created by the store
            notes: Optional initial notes, most recent first
        """
        self.default_title = default_title
        self._state = settle(NoteState(notes=tuple(notes or ())), default_title)

    def snapshot(self) -> NoteState:
        """Return the current immutable snapshot."""
        return self._state

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._state.notes

    @property
    def active_id(self) -> str | None:
        return self._state.active_id

    @property
    def active_note(self) -> Note | None:
        return self._state.active_note

    def get(self, note_id: str) -> Note | None:
        return self._state.get(note_id)

    def require(self, note_id: str) -> Note:
        """
        Get a note or fail.

        Raises:
            NotFoundError: If no note has this id
        """
        note = self._state.get(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        return note

    def create(self, title: str | None = None) -> Note:
        """Create an empty note at the head of the list and select it."""
        state, note = create_note(self._state, title=self.default_title if title is None else title)
        self._commit(state)
        logger.bind(note_id=note.id).debug("Note created: {}", note.id)
        return note

    def update(self, note_id: str, **patch) -> Note | None:
        """
        Merge fields onto a note and refresh its `updated_at`.

        Returns:
            The updated note, or None when the id is unknown (no-op)
        """
        self._commit(update_note(self._state, note_id, patch))
        return self._state.get(note_id)

    def append_image(self, note_id: str, image_b64: str) -> Note | None:
        """Attach a base64 image to the end of a note's image list."""
        note = self._state.get(note_id)
        if note is None:
            return None
        return self.update(note_id, images=[*note.images, image_b64])

    def remove(self, note_id: str) -> None:
        """Remove a note. Removing the last note leaves one fresh note behind."""
        self._commit(remove_note(self._state, note_id))
        logger.bind(note_id=note_id).debug("Note removed: {}", note_id)

    def select(self, note_id: str) -> Note:
        """
        Make a note the active selection.

        Raises:
            NotFoundError: If no note has this id
        """
        note = self.require(note_id)
        self._commit(select_note(self._state, note_id))
        return note

    def _commit(self, state: NoteState) -> None:
        self._state = settle(state, self.default_title)
