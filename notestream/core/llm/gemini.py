"""
Gemini generative backend using the google-genai SDK.
"""

import base64
from collections.abc import AsyncIterator

from google import genai
from google.genai import types

from notestream.core.llm.base import GenerativeBackend, wrap_backend_error
from notestream.core.llm.prompts import build_prompt
from notestream.models.session import GenerationRequest
from notestream.utils.exceptions import LLMError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)


class GeminiBackend(GenerativeBackend):
    """
    Gemini backend for streamed multimodal generation and Imagen images.

    Image and audio inputs are sent as inline byte parts ahead of the prompt.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        image_model: str = "imagen-4.0-generate-001",
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ):
        """
        Initialize Gemini backend.

        Args:
            api_key: Gemini API key
            model: Model name (e.g., "gemini-2.5-flash")
            image_model: Imagen model used by generate_image
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
        """
        self.model_name = model
        self.image_model = image_model
        self.client = genai.Client(api_key=api_key)
        self.generation_config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        )

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """
        Stream generated content for the request.

        Raises:
            LLMError: If the Gemini API call fails
        """
        contents: list = []
        if request.media is not None:
            contents.append(types.Part.from_bytes(data=request.media.data, mime_type=request.media.mime_type))
        contents.append(build_prompt(request))

        try:
            response = await self.client.aio.models.generate_content_stream(
                model=self.model_name,
                contents=contents,
                config=self.generation_config,
            )
            async for chunk in response:
                # Chunks carrying only finish/safety metadata have no text
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.bind(model=self.model_name, kind=request.kind.value, error_type=type(e).__name__).error(
                "Gemini API error: {}", e
            )
            raise wrap_backend_error(e, "Gemini") from e

    async def generate_image(self, prompt: str) -> str:
        """
        Generate one image with the configured Imagen model.

        Returns:
            Image bytes as base64 text

        Raises:
            BillingRequiredError: If the model is restricted to billed accounts
            LLMError: If the call fails or no image is returned
        """
        try:
            response = await self.client.aio.models.generate_images(
                model=self.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(number_of_images=1),
            )
        except Exception as e:
            logger.bind(model=self.image_model, error_type=type(e).__name__).error(
                "Gemini image generation error: {}", e
            )
            raise wrap_backend_error(e, "Gemini") from e

        generated = response.generated_images or []
        image = generated[0].image if generated else None
        if image is None or not image.image_bytes:
            raise LLMError("Gemini returned no image", context={"model": self.image_model})
        return base64.b64encode(image.image_bytes).decode("ascii")
