"""
Factory for creating generative backends.
"""

from notestream.config import LLMConfig
from notestream.core.llm.base import GenerativeBackend
from notestream.core.llm.gemini import GeminiBackend
from notestream.core.llm.ollama import OllamaBackend
from notestream.core.llm.openai import OpenAIBackend
from notestream.utils.exceptions import ConfigurationError


class LLMFactory:
    """Factory for creating generative backends from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> GenerativeBackend:
        """
        Create generative backend from configuration.

        Args:
            config: LLM configuration

        Returns:
            Backend instance

        Raises:
            ConfigurationError: If the provider is unknown, or needs an API key and none is set
        """
        if config.provider == "gemini":
            if not config.api_key:
                raise ConfigurationError("Gemini API key is required", context={"provider": "gemini"})
            return GeminiBackend(
                api_key=config.api_key,
                model=config.model,
                image_model=config.image_model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required", context={"provider": "openai"})
            return OpenAIBackend(
                api_key=config.api_key,
                model=config.model,
                image_model=config.image_model,
                base_url=config.base_url,
                timeout=config.timeout,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        elif config.provider == "ollama":
            return OllamaBackend(
                host=config.base_url or "http://localhost:11434",
                model=config.model,
                timeout=config.timeout,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        else:
            raise ConfigurationError(
                f"Unsupported LLM provider: {config.provider}", context={"provider": config.provider}
            )
