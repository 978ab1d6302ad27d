"""
Streaming session models.

A session is one in-flight generation request bound to a fixed target
document id. Sessions are ephemeral and never persisted.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from notestream.models.media import MediaPayload


class RequestKind(str, Enum):
    """Kinds of streaming generation requests."""

    SUMMARIZE = "summarize"
    ASK = "ask"
    DESCRIBE_IMAGE = "describe_image"
    SUMMARIZE_AUDIO = "summarize_audio"


class StreamMode(str, Enum):
    """How a session treats the target's existing content."""

    REPLACE = "replace"  # clear before streaming, roll back on failure
    APPEND = "append"  # append after a prefix, keep partial output on failure


class SessionStatus(str, Enum):
    """Session lifecycle status."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GenerationRequest(BaseModel):
    """Operation descriptor sent to the generative backend."""

    kind: RequestKind = Field(..., description="Operation to perform")
    text: str = Field(default="", description="Input text, question or prompt")
    media: MediaPayload | None = Field(default=None, description="Optional image or audio input")


class StreamSession(BaseModel):
    """State of one streaming generation bound to a document id."""

    id: str = Field(..., description="Session ID (sess_xxx)")
    target_id: str = Field(..., description="Document id captured at session start")
    mode: StreamMode
    prefix: str = Field(default="", description="Separator appended before the first chunk")
    original_content: str = Field(
        default="", description="Target content captured before the session started"
    )
    accumulator: str = Field(default="", description="Text folded so far, prefix excluded")
    chunks_applied: int = 0
    status: SessionStatus = SessionStatus.RUNNING
    error: str | None = None
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None


class StreamOutcome(BaseModel):
    """Result returned by the streaming controller once a session ends."""

    session_id: str
    target_id: str
    succeeded: bool
    content: str | None = Field(
        default=None, description="Final body of the target, None if it no longer exists"
    )
    generated_text: str = Field(default="", description="All chunks joined in arrival order")
    chunks_applied: int = 0
    error: str | None = None
