"""
Tests for factory classes.

Tests the creation of generative backends from configuration.
"""

import pytest

from notestream.config import LLMConfig
from notestream.core.factory import LLMFactory
from notestream.core.llm import GeminiBackend, GenerativeBackend, OllamaBackend, OpenAIBackend
from notestream.utils.exceptions import ConfigurationError


class TestLLMFactory:
    """Test LLM factory."""

    def test_create_gemini(self):
        backend = LLMFactory.create(LLMConfig(provider="gemini", api_key="test-key"))

        assert isinstance(backend, GeminiBackend)
        assert isinstance(backend, GenerativeBackend)
        assert backend.model_name == "gemini-2.5-flash"
        assert backend.image_model == "imagen-4.0-generate-001"

    def test_gemini_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="API key"):
            LLMFactory.create(LLMConfig(provider="gemini"))

    def test_create_openai(self):
        config = LLMConfig(provider="openai", model="gpt-4o-mini", image_model="dall-e-3", api_key="sk-test")

        backend = LLMFactory.create(config)

        assert isinstance(backend, OpenAIBackend)
        assert backend.model == "gpt-4o-mini"
        assert backend.image_model == "dall-e-3"

    def test_create_openai_provider_defaults(self):
        """Test OpenAI gets its own model names when none are configured."""
        backend = LLMFactory.create(LLMConfig(provider="openai", api_key="sk-test"))

        assert backend.model == "gpt-4o-mini"
        assert backend.image_model == "dall-e-3"

    def test_gemini_custom_image_model(self):
        config = LLMConfig(provider="gemini", api_key="test-key", image_model="imagen-4.0-fast-generate-001")

        backend = LLMFactory.create(config)

        assert backend.image_model == "imagen-4.0-fast-generate-001"

    def test_openai_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            LLMFactory.create(LLMConfig(provider="openai", model="gpt-4o-mini"))

    def test_create_ollama_default_host(self):
        backend = LLMFactory.create(LLMConfig(provider="ollama", model="llava"))

        assert isinstance(backend, OllamaBackend)
        assert backend.host == "http://localhost:11434"

    def test_create_ollama_custom_host(self):
        backend = LLMFactory.create(LLMConfig(provider="ollama", model="llava", base_url="http://gpu:11434"))

        assert backend.host == "http://gpu:11434"

    def test_unsupported_provider(self):
        with pytest.raises(ConfigurationError, match="Unsupported LLM provider: invalid"):
            LLMFactory.create(LLMConfig(provider="invalid"))
