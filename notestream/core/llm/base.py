"""
Abstract base class for generative backends.
Handles streamed text generation and single-shot image generation.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from notestream.models.session import GenerationRequest
from notestream.utils.exceptions import BillingRequiredError, LLMError

BILLING_ERROR_MARKER = "only accessible to billed users"


class GenerativeBackend(ABC):
    """
    Abstract base for generative-AI providers.

    Responsibilities:
    - Stream text for summarize / ask / describe-image / summarize-audio requests
    - Generate a single image from a prompt
    """

    @abstractmethod
    def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """
        Stream generated text for a request.

        Implementations are async generators: chunks are yielded in the
        order the provider produces them, until completion or error.

        Args:
            request: Operation descriptor

        Yields:
            Text chunks

        Raises:
            LLMError: If the provider call fails
            ConfigurationError: If the provider is missing a credential
        """

    @abstractmethod
    async def generate_image(self, prompt: str) -> str:
        """
        Generate one image from a prompt.

        Args:
            prompt: Image description

        Returns:
            Base64-encoded PNG bytes

        Raises:
            LLMError: If generation fails or returns no image
            BillingRequiredError: If the account is not entitled to image generation
        """

    async def close(self):
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """
        # Default implementation does nothing


def wrap_backend_error(error: Exception, provider: str) -> LLMError:
    """
    Convert a provider exception into the NoteStream error taxonomy.

    Billing/entitlement failures are recognised by message content and
    become BillingRequiredError; everything else becomes LLMError.
    """
    if isinstance(error, LLMError):
        return error
    message = f"{provider} API error: {error}"
    context = {"provider": provider, "error_type": type(error).__name__}
    if BILLING_ERROR_MARKER in str(error):
        return BillingRequiredError(message, context=context)
    return LLMError(message, context=context)
