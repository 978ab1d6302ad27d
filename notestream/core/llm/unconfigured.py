"""
Placeholder backend used when no provider could be configured.
"""

from collections.abc import AsyncIterator

from notestream.core.llm.base import GenerativeBackend
from notestream.models.session import GenerationRequest
from notestream.utils.exceptions import ConfigurationError


class UnconfiguredBackend(GenerativeBackend):
    """Fails every request with the configuration problem found at startup."""

    def __init__(self, reason: str):
        self.reason = reason

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        raise ConfigurationError(self.reason)
        yield  # pragma: no cover

    async def generate_image(self, prompt: str) -> str:
        raise ConfigurationError(self.reason)
