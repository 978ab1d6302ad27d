"""
NoteStream FastAPI Application

A REST API for the NoteStream note assistant and simulated chat.
Provides endpoints for editing notes, streaming AI output into them,
generating images, and chatting with mock contacts.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from notestream.config import Config
from notestream.core.chat_store import ChatRepository, JsonFileStorage, KeyValueStorage
from notestream.core.document_store import DocumentStore
from notestream.core.factory import LLMFactory
from notestream.core.llm import GenerativeBackend, UnconfiguredBackend
from notestream.core.status import StatusReporter
from notestream.models import Chat, Contact, Message, MessageStatus, Note, StreamOutcome
from notestream.models.media import AudioRecording, CapturedFrame
from notestream.services import ChatService, NoteAssistant, StreamingAppendController
from notestream.utils.exceptions import (
    BillingRequiredError,
    ConfigurationError,
    LLMError,
    NoteStreamError,
    NotFoundError,
    SessionConflictError,
    ValidationError,
)
from notestream.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class NoteStreamContext:
    """Everything the API needs, wired together."""

    config: Config
    backend: GenerativeBackend
    store: DocumentStore
    status: StatusReporter
    controller: StreamingAppendController
    assistant: NoteAssistant
    chats: ChatService
    tasks: set[asyncio.Task] = field(default_factory=set)

    def spawn(self, coro) -> asyncio.Task:
        """Run a coroutine in the background, keeping a reference until it ends."""
        task = asyncio.create_task(coro)
        self.tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self.tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            error = task.exception()
            logger.bind(error_type=type(error).__name__).error("Background task failed: {}", error)

    async def close(self) -> None:
        for task in list(self.tasks):
            task.cancel()
        self.status.close()
        await self.backend.close()


def build_context(
    config: Config,
    backend: GenerativeBackend | None = None,
    storage: KeyValueStorage | None = None,
) -> NoteStreamContext:
    """
    Wire stores, services and the generative backend.

    A backend that cannot be configured (e.g. missing API key) is replaced by
    one that fails every request with the configuration error.
    """
    if backend is None:
        try:
            backend = LLMFactory.create(config.llm)
        except ConfigurationError as e:
            logger.warning("Generative backend unavailable: {}", e.message)
            backend = UnconfiguredBackend(e.message)

    store = DocumentStore(default_title=config.notes.default_title)
    status = StatusReporter(
        idle_label=config.status.idle_label,
        default_duration_ms=config.status.default_duration_ms,
    )
    controller = StreamingAppendController(
        backend=backend,
        store=store,
        status=status,
        status_duration_ms=config.status.default_duration_ms,
    )
    assistant = NoteAssistant(
        store=store,
        controller=controller,
        status=status,
        notes_config=config.notes,
        status_config=config.status,
    )
    repository = ChatRepository(
        storage or JsonFileStorage(config.chat.storage_dir),
        key=config.chat.storage_key,
    )
    chats = ChatService(repository=repository, config=config.chat)
    chats.initialize()

    return NoteStreamContext(
        config=config,
        backend=backend,
        store=store,
        status=status,
        controller=controller,
        assistant=assistant,
        chats=chats,
    )


# Global context instance
context: NoteStreamContext | None = None


# Pydantic models for API
class NoteListResponse(BaseModel):
    """All notes plus the active selection."""

    active_id: str | None
    notes: list[Note]


class CreateNoteRequest(BaseModel):
    """Request model for creating a note."""

    title: str | None = None


class UpdateNoteRequest(BaseModel):
    """Request model for saving editor changes."""

    title: str | None = None
    content: str | None = None


class SummarizeRequest(BaseModel):
    """Request model for summarizing a note."""

    text: str | None = Field(default=None, description="Unsaved editor text to summarize")


class AskRequest(BaseModel):
    """Request model for asking the AI a question."""

    question: str


class VoiceNoteRequest(BaseModel):
    """Request model for summarizing a recorded voice note."""

    audio_base64: str
    mime_type: str = "audio/webm"


class DescribeImageRequest(BaseModel):
    """Request model for asking about a captured frame."""

    image_base64: str
    prompt: str | None = None


class DescribeImageResponse(BaseModel):
    """Response model for image description."""

    description: str


class InsertCapturedImageRequest(BaseModel):
    """Request model for inserting a captured frame into a note."""

    image_base64: str
    description: str | None = None


class GenerateImageRequest(BaseModel):
    """Request model for AI image generation."""

    prompt: str
    insert_into_body: bool = Field(
        default=False, description="Embed as markdown in the body instead of attaching"
    )


class GenerateImageResponse(BaseModel):
    """Response model for AI image generation."""

    note: Note
    filename: str


class StreamStartedResponse(BaseModel):
    """Response for a session started in the background."""

    note_id: str
    started: bool = True


class StatusResponse(BaseModel):
    """Current status line."""

    status: str
    busy: bool


class CreateChatRequest(BaseModel):
    """Request model for opening a chat."""

    contact_id: str


class SendMessageRequest(BaseModel):
    """Request model for sending a chat message."""

    content: str
    auto_reply: bool = True


class MessageStatusRequest(BaseModel):
    """Request model for changing a message's delivery status."""

    status: MessageStatus


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    context_initialized: bool
    provider: str
    model: str | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global context

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting NoteStream server")
    if context is None:
        logger.info(f"Configuration: LLM={config.llm.provider}/{config.llm.model}")
        context = build_context(config)

    yield

    # Cleanup
    logger.info("Shutting down NoteStream server")
    await context.close()
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="NoteStream API",
    description="AI-assisted notes with streamed generation, plus a simulated chat",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _ctx() -> NoteStreamContext:
    if not context:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return context


def _http_error(error: NoteStreamError) -> HTTPException:
    """Map a NoteStream error onto an HTTP status."""
    if isinstance(error, ValidationError):
        code = 400
    elif isinstance(error, NotFoundError):
        code = 404
    elif isinstance(error, SessionConflictError):
        code = 409
    elif isinstance(error, BillingRequiredError):
        code = 402
    elif isinstance(error, ConfigurationError):
        code = 503
    elif isinstance(error, LLMError):
        code = 502
    else:
        code = 500
    return HTTPException(status_code=code, detail=error.message)


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if context else "initializing",
        context_initialized=context is not None,
        provider=context.config.llm.provider if context else "",
        model=context.config.llm.model if context else None,
    )


@app.get("/status", response_model=StatusResponse)
async def get_status():
    """Current transient status line and whether an AI job is running."""
    ctx = _ctx()
    return StatusResponse(status=ctx.status.current, busy=ctx.assistant.busy)


# Note endpoints
@app.get("/notes", response_model=NoteListResponse)
async def list_notes():
    """List notes, most recent first, with the active selection."""
    snapshot = _ctx().store.snapshot()
    return NoteListResponse(active_id=snapshot.active_id, notes=list(snapshot.notes))


@app.post("/notes", response_model=Note)
async def create_note(request: CreateNoteRequest):
    """Create an empty note at the top of the list and select it."""
    return _ctx().store.create(title=request.title)


@app.get("/notes/{note_id}", response_model=Note)
async def get_note(note_id: str):
    """Retrieve a note by ID."""
    try:
        return _ctx().store.require(note_id)
    except NotFoundError as e:
        raise _http_error(e) from e


@app.put("/notes/{note_id}", response_model=Note)
async def update_note(note_id: str, request: UpdateNoteRequest):
    """Save editor changes to a note."""
    try:
        return _ctx().assistant.save(note_id, title=request.title, content=request.content)
    except NoteStreamError as e:
        raise _http_error(e) from e


@app.delete("/notes/{note_id}")
async def delete_note(note_id: str):
    """
    Delete a note.

    Deleting the last note leaves a fresh empty note selected.
    """
    ctx = _ctx()
    try:
        ctx.store.require(note_id)
    except NotFoundError as e:
        raise _http_error(e) from e
    ctx.store.remove(note_id)
    return {"id": note_id, "deleted": True, "active_id": ctx.store.active_id}


@app.post("/notes/{note_id}/select", response_model=Note)
async def select_note(note_id: str):
    """Make a note the active selection."""
    try:
        return _ctx().store.select(note_id)
    except NotFoundError as e:
        raise _http_error(e) from e


async def _run_or_spawn(ctx: NoteStreamContext, note_id: str, coro, wait: bool):
    """Await a streaming operation, or start it in the background."""
    if wait:
        try:
            return await coro
        except NoteStreamError as e:
            raise _http_error(e) from e

    if ctx.controller.is_streaming(note_id):
        coro.close()
        raise HTTPException(status_code=409, detail=f"Note {note_id} is already streaming")
    ctx.spawn(coro)
    return StreamStartedResponse(note_id=note_id)


@app.post("/notes/{note_id}/summarize", response_model=StreamOutcome | StreamStartedResponse)
async def summarize_note(
    note_id: str,
    request: SummarizeRequest | None = None,
    wait: bool = Query(default=True, description="Wait for the stream to finish"),
):
    """
    Replace the note body with an AI summary, streamed chunk by chunk.

    If the backend fails, the original body is restored.
    """
    ctx = _ctx()
    try:
        ctx.store.require(note_id)
    except NotFoundError as e:
        raise _http_error(e) from e
    text = request.text if request else None
    return await _run_or_spawn(ctx, note_id, ctx.assistant.summarize(note_id, text=text), wait)


@app.post("/notes/{note_id}/ask", response_model=StreamOutcome | StreamStartedResponse)
async def ask_ai(
    note_id: str,
    request: AskRequest,
    wait: bool = Query(default=True, description="Wait for the stream to finish"),
):
    """
    Append an AI answer to the note.

    Partial answers are kept if the backend fails midway.
    """
    ctx = _ctx()
    try:
        ctx.store.require(note_id)
    except NotFoundError as e:
        raise _http_error(e) from e
    return await _run_or_spawn(ctx, note_id, ctx.assistant.ask(request.question, note_id=note_id), wait)


@app.post("/notes/{note_id}/voice-note", response_model=StreamOutcome)
async def summarize_voice_note(note_id: str, request: VoiceNoteRequest):
    """Append a summary of a recorded voice note to the note."""
    ctx = _ctx()
    try:
        recording = AudioRecording.from_base64(request.audio_base64, request.mime_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid audio data: {e}") from e
    try:
        return await ctx.assistant.summarize_voice_note(recording, note_id=note_id)
    except NoteStreamError as e:
        raise _http_error(e) from e


@app.post("/images/describe", response_model=DescribeImageResponse)
async def describe_image(request: DescribeImageRequest):
    """Ask the AI about a captured camera frame."""
    ctx = _ctx()
    try:
        frame = CapturedFrame.from_base64(request.image_base64, "image/jpeg")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid image data: {e}") from e
    description = await ctx.assistant.describe_image(frame, request.prompt)
    return DescribeImageResponse(description=description)


@app.post("/notes/{note_id}/captured-images", response_model=Note)
async def insert_captured_image(note_id: str, request: InsertCapturedImageRequest):
    """Insert a captured frame, and optionally the AI answer about it, into the note body."""
    ctx = _ctx()
    try:
        frame = CapturedFrame.from_base64(request.image_base64, "image/jpeg")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid image data: {e}") from e
    try:
        return ctx.assistant.insert_captured_image(frame, request.description, note_id=note_id)
    except NoteStreamError as e:
        raise _http_error(e) from e


@app.post("/notes/{note_id}/images", response_model=GenerateImageResponse)
async def generate_image(note_id: str, request: GenerateImageRequest):
    """Generate an image from a prompt and attach it to the note."""
    ctx = _ctx()
    try:
        ctx.store.require(note_id)
        if request.insert_into_body:
            image_b64 = await ctx.assistant.generate_image(request.prompt)
            note = ctx.assistant.insert_generated_image(request.prompt, image_b64, note_id=note_id)
        else:
            note = await ctx.assistant.attach_generated_image(request.prompt, note_id=note_id)
    except NoteStreamError as e:
        raise _http_error(e) from e
    return GenerateImageResponse(note=note, filename=NoteAssistant.image_filename(request.prompt))


# Chat endpoints
@app.get("/contacts", response_model=list[Contact])
async def list_contacts(available: bool = Query(default=False)):
    """List contacts; `available=true` returns only those without a chat."""
    chats = _ctx().chats
    return chats.available_contacts() if available else chats.contacts


@app.get("/chats", response_model=list[Chat])
async def list_chats(q: str | None = Query(default=None, description="Filter by contact name")):
    """List chats, optionally filtered by contact name."""
    chats = _ctx().chats
    return chats.search(q) if q else chats.chats


@app.post("/chats", response_model=Chat)
async def create_chat(request: CreateChatRequest):
    """Open a chat with a contact (returns the existing one if present)."""
    try:
        return _ctx().chats.create_new_chat(request.contact_id)
    except NoteStreamError as e:
        raise _http_error(e) from e


@app.get("/chats/{chat_id}", response_model=Chat)
async def get_chat(chat_id: str):
    """Retrieve a chat with its messages."""
    try:
        return _ctx().chats.get_chat(chat_id)
    except NoteStreamError as e:
        raise _http_error(e) from e


@app.post("/chats/{chat_id}/messages", response_model=Message)
async def send_message(chat_id: str, request: SendMessageRequest):
    """Send a message; the contact auto-replies in the background."""
    ctx = _ctx()
    try:
        chat = ctx.chats.get_chat(chat_id)
        message = ctx.chats.send_message(chat_id, request.content)
    except NoteStreamError as e:
        raise _http_error(e) from e
    if request.auto_reply:
        ctx.spawn(ctx.chats.simulate_auto_reply(chat_id, chat.contact_id))
    return message


@app.post("/chats/{chat_id}/read", response_model=Chat)
async def mark_read(chat_id: str):
    """Mark the contact's messages as read."""
    try:
        return _ctx().chats.mark_messages_as_read(chat_id)
    except NoteStreamError as e:
        raise _http_error(e) from e


@app.put("/messages/{message_id}/status")
async def update_message_status(message_id: str, request: MessageStatusRequest) -> dict[str, Any]:
    """Change a message's delivery status."""
    _ctx().chats.update_message_status(message_id, request.status)
    return {"id": message_id, "status": request.status.value}


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "NoteStream API",
        "version": "0.1.0",
        "description": "AI-assisted notes with streamed generation, plus a simulated chat",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
