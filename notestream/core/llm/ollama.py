"""
Ollama generative backend using native ollama-python SDK.
"""

from collections.abc import AsyncIterator

import ollama

from notestream.core.llm.base import GenerativeBackend, wrap_backend_error
from notestream.core.llm.prompts import build_prompt
from notestream.models.session import GenerationRequest
from notestream.utils.exceptions import LLMError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaBackend(GenerativeBackend):
    """
    Ollama backend for streamed chat completions.

    Images are passed to vision models through the message `images` field.
    Audio input and image generation are not available on Ollama.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llava",
        timeout: float = 120.0,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ):
        """
        Initialize Ollama backend.

        Args:
            host: Ollama server URL
            model: Model name (a vision model such as "llava" for image questions)
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

        # Create async client
        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """
        Stream a chat completion for the request.

        Raises:
            LLMError: If the request carries audio or the Ollama call fails
        """
        message = {"role": "user", "content": build_prompt(request)}
        if request.media is not None:
            if not request.media.mime_type.startswith("image/"):
                raise LLMError(
                    f"Ollama does not accept {request.media.mime_type} input",
                    context={"mime_type": request.media.mime_type},
                )
            message["images"] = [request.media.base64_data]

        try:
            response = await self.client.chat(
                model=self.model,
                messages=[message],
                stream=True,
                options={"temperature": self.temperature, "num_predict": self.max_tokens},
            )
            async for part in response:
                content = part["message"]["content"]
                if content:
                    yield content
        except Exception as e:
            logger.bind(model=self.model, kind=request.kind.value, error_type=type(e).__name__).error(
                "Ollama API error: {}", e
            )
            raise wrap_backend_error(e, "Ollama") from e

    async def generate_image(self, prompt: str) -> str:
        """Image generation is not available on Ollama."""
        raise LLMError("Ollama does not support image generation", context={"model": self.model})

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
