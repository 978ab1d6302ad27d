"""
OpenAI generative backend using official SDK.
"""

from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from notestream.core.llm.base import GenerativeBackend, wrap_backend_error
from notestream.core.llm.prompts import build_prompt
from notestream.models.session import GenerationRequest
from notestream.utils.exceptions import LLMError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)

# input_audio only accepts these container formats
AUDIO_FORMATS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
}


class OpenAIBackend(GenerativeBackend):
    """
    OpenAI backend for streamed chat completions and image generation.

    Images are sent as data URLs, audio as `input_audio` content parts.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        image_model: str = "dall-e-3",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ):
        """
        Initialize OpenAI backend.

        Args:
            api_key: OpenAI API key
            model: Chat model name (e.g., "gpt-4o", "gpt-4o-mini")
            image_model: Image model name (e.g., "dall-e-3")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
        """
        self.model = model
        self.image_model = image_model
        self.temperature = temperature
        self.max_tokens = max_tokens

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """
        Stream a chat completion for the request.

        Raises:
            LLMError: If the OpenAI API call fails or the audio format is unsupported
        """
        messages = [{"role": "user", "content": self._build_content(request)}]

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=True,
            )
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except Exception as e:
            logger.bind(model=self.model, kind=request.kind.value, error_type=type(e).__name__).error(
                "OpenAI API error: {}", e
            )
            raise wrap_backend_error(e, "OpenAI") from e

    async def generate_image(self, prompt: str) -> str:
        """
        Generate one image with the images API.

        Raises:
            LLMError: If the call fails or no image is returned
        """
        try:
            response = await self.client.images.generate(
                model=self.image_model,
                prompt=prompt,
                n=1,
                response_format="b64_json",
            )
        except Exception as e:
            logger.bind(model=self.image_model, error_type=type(e).__name__).error(
                "OpenAI image generation error: {}", e
            )
            raise wrap_backend_error(e, "OpenAI") from e

        image_b64 = response.data[0].b64_json if response.data else None
        if not image_b64:
            raise LLMError("OpenAI returned no image", context={"model": self.image_model})
        return image_b64

    def _build_content(self, request: GenerationRequest) -> str | list[dict[str, Any]]:
        prompt = build_prompt(request)
        media = request.media
        if media is None:
            return prompt

        parts: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        if media.mime_type.startswith("image/"):
            parts.append({"type": "image_url", "image_url": {"url": media.data_url}})
        elif media.mime_type.startswith("audio/"):
            audio_format = AUDIO_FORMATS.get(media.mime_type.split(";")[0])
            if audio_format is None:
                raise LLMError(
                    f"OpenAI does not accept audio of type {media.mime_type}",
                    context={"mime_type": media.mime_type},
                )
            parts.append(
                {
                    "type": "input_audio",
                    "input_audio": {"data": media.base64_data, "format": audio_format},
                }
            )
        else:
            raise LLMError(
                f"Unsupported media type: {media.mime_type}",
                context={"mime_type": media.mime_type},
            )
        return parts

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
