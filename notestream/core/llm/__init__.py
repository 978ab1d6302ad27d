"""
Generative backend abstraction layer.

Supported providers:
- Gemini (google-genai SDK, including Imagen)
- OpenAI (official SDK)
- Ollama (native SDK)
"""
from notestream.core.llm.base import GenerativeBackend, wrap_backend_error
from notestream.core.llm.gemini import GeminiBackend
from notestream.core.llm.ollama import OllamaBackend
from notestream.core.llm.openai import OpenAIBackend
from notestream.core.llm.unconfigured import UnconfiguredBackend

__all__ = [
    "GenerativeBackend",
    "GeminiBackend",
    "OllamaBackend",
    "OpenAIBackend",
    "UnconfiguredBackend",
    "wrap_backend_error",
]
