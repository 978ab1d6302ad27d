"""
Media payloads produced by capture devices and sent to the generative backend.
"""

import base64

from pydantic import BaseModel, Field


class MediaPayload(BaseModel):
    """Raw media bytes tagged with a MIME type."""

    data: bytes = Field(..., description="Raw media bytes")
    mime_type: str = Field(..., description="MIME type, e.g. image/jpeg or audio/webm")

    @property
    def base64_data(self) -> str:
        """Media bytes encoded as base64 text."""
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        """Media as a `data:` URL suitable for markdown embedding."""
        return f"data:{self.mime_type};base64,{self.base64_data}"

    @classmethod
    def from_base64(cls, data: str, mime_type: str) -> "MediaPayload":
        """
        Build a payload from base64 text.

        Accepts either bare base64 or a full `data:` URL.
        """
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]
        return cls(data=base64.b64decode(data), mime_type=mime_type)


class CapturedFrame(MediaPayload):
    """A single still frame taken from a camera."""

    mime_type: str = "image/jpeg"
    width: int = 0
    height: int = 0


class AudioRecording(MediaPayload):
    """A finite audio buffer produced after a recorder is stopped."""

    mime_type: str = "audio/webm"

    def is_empty(self) -> bool:
        """Check whether anything was recorded."""
        return len(self.data) == 0
