"""
Immutable note collection snapshots.

Every function here takes a NoteState and returns a new one; notes are
replaced, never mutated in place, so a reader holding an older snapshot
keeps seeing consistent data.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from notestream.models.note import Note
from notestream.utils.exceptions import ValidationError
from notestream.utils.id_generator import generate_note_id

PATCHABLE_FIELDS = frozenset({"title", "content", "images"})


@dataclass(frozen=True)
class NoteState:
    """Snapshot of all notes (most recent first) plus the active selection."""

    notes: tuple[Note, ...] = ()
    active_id: str | None = None

    def get(self, note_id: str) -> Note | None:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def __contains__(self, note_id: object) -> bool:
        return any(note.id == note_id for note in self.notes)

    @property
    def active_note(self) -> Note | None:
        return self.get(self.active_id) if self.active_id else None


def new_note(title: str = "", content: str = "", now: datetime | None = None) -> Note:
    """Allocate a note with a fresh id and equal created/updated timestamps."""
    now = now or datetime.now()
    return Note(
        id=generate_note_id(),
        title=title,
        content=content,
        images=[],
        created_at=now,
        updated_at=now,
    )


def create_note(state: NoteState, title: str = "") -> tuple[NoteState, Note]:
    """
    Insert a new empty note at the head of the collection and select it.

    Returns:
        Tuple of (new state, created note)
    """
    note = new_note(title=title)
    return NoteState(notes=(note, *state.notes), active_id=note.id), note


def update_note(state: NoteState, note_id: str, patch: dict[str, Any]) -> NoteState:
    """
    Merge a partial patch onto the note matching `note_id`.

    Refreshes `updated_at`. Returns the same state when the id is unknown.

    Raises:
        ValidationError: If the patch touches a non-patchable field
    """
    invalid = set(patch) - PATCHABLE_FIELDS
    if invalid:
        raise ValidationError(
            f"Cannot patch note fields: {', '.join(sorted(invalid))}",
            context={"note_id": note_id},
        )
    if note_id not in state:
        return state

    notes = tuple(
        note.model_copy(update={**patch, "updated_at": datetime.now()})
        if note.id == note_id
        else note
        for note in state.notes
    )
    return replace(state, notes=notes)


def remove_note(state: NoteState, note_id: str) -> NoteState:
    """Drop a note; clears the selection if it pointed at the removed note."""
    notes = tuple(note for note in state.notes if note.id != note_id)
    active_id = None if state.active_id == note_id else state.active_id
    return NoteState(notes=notes, active_id=active_id)


def select_note(state: NoteState, note_id: str | None) -> NoteState:
    """Set the active selection. Unknown ids clear it."""
    return replace(state, active_id=note_id if note_id in state else None)


def settle(state: NoteState, default_title: str = "") -> NoteState:
    """
    Restore the selection invariants.

    - An empty collection gets one fresh note, which becomes selected.
    - A non-empty collection without a valid selection selects its first note.
    """
    if not state.notes:
        settled, _ = create_note(state, title=default_title)
        return settled
    if state.active_id is None or state.active_id not in state:
        return replace(state, active_id=state.notes[0].id)
    return state
