"""
Note model for the AI note-taking assistant.

Notes are the documents that streaming sessions write into. They are
treated as immutable snapshots: every mutation produces a new instance.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Note(BaseModel):
    """
    A user note with optional AI-generated images.

    The body (`content`) is the append target for streaming sessions.
    `id` and `created_at` never change after creation; `updated_at` is
    refreshed on every mutation.
    """

    # Core identity
    id: str = Field(..., description="Unique note ID (note_xxx)")

    # Content
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note body, target of streamed text")
    images: list[str] = Field(
        default_factory=list,
        description="Attached images as base64 strings, in insertion order",
    )

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last update timestamp")

    @property
    def content_preview(self) -> str:
        """
        Get a short preview of the body for note listings.

        Returns:
            First 100 characters of content
        """
        return self.content[:100] if len(self.content) > 100 else self.content

    def is_empty(self) -> bool:
        """Check whether the note body holds any non-whitespace text."""
        return not self.content.strip()
