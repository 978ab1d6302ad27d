"""
Shared test fixtures for all test modules.
"""

import asyncio

import pytest

from notestream.core.document_store import DocumentStore
from notestream.core.llm.base import GenerativeBackend
from notestream.core.status import StatusReporter
from notestream.services import NoteAssistant, StreamingAppendController


class ScriptedBackend(GenerativeBackend):
    """
    Backend that plays back a fixed script on every stream call.

    Script steps:
    - str: yielded as a chunk
    - exception instance: raised
    - asyncio.Event: awaited before continuing
    - callable: called with no arguments
    """

    def __init__(self, script=(), image: str | None = None, image_error: Exception | None = None):
        self.script = list(script)
        self.image = image
        self.image_error = image_error
        self.requests = []
        self.image_prompts = []
        self.closed = False

    async def stream(self, request):
        self.requests.append(request)
        for step in self.script:
            if isinstance(step, str):
                await asyncio.sleep(0)
                yield step
            elif isinstance(step, BaseException):
                raise step
            elif isinstance(step, asyncio.Event):
                await step.wait()
            else:
                step()

    async def generate_image(self, prompt: str) -> str:
        self.image_prompts.append(prompt)
        if self.image_error is not None:
            raise self.image_error
        return self.image

    async def close(self):
        self.closed = True


@pytest.fixture
def scripted_backend():
    """Scripted backend class, instantiate with a list of steps."""
    return ScriptedBackend


@pytest.fixture
def store():
    """Document store with the default note title."""
    return DocumentStore(default_title="Untitled note")


@pytest.fixture
def status():
    """Status reporter with the default idle label."""
    reporter = StatusReporter(idle_label="Ready", default_duration_ms=3000)
    yield reporter
    reporter.close()


@pytest.fixture
def make_controller(store, status):
    """Build a streaming controller around a backend."""

    def _make(backend):
        return StreamingAppendController(backend=backend, store=store, status=status)

    return _make


@pytest.fixture
def make_assistant(store, status, make_controller):
    """Build a note assistant around a backend."""

    def _make(backend):
        return NoteAssistant(store=store, controller=make_controller(backend), status=status)

    return _make
