"""Note collection state and its owning store."""

from notestream.core.document_store.document_store import DocumentStore
from notestream.core.document_store.state import (
    NoteState,
    create_note,
    new_note,
    remove_note,
    select_note,
    settle,
    update_note,
)

__all__ = [
    "DocumentStore",
    "NoteState",
    "new_note",
    "create_note",
    "update_note",
    "remove_note",
    "select_note",
    "settle",
]
