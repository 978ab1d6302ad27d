"""
Tests for Ollama generative backend.
"""

from unittest.mock import AsyncMock, patch

import pytest

from notestream.core.llm.ollama import OllamaBackend
from notestream.models.media import AudioRecording, CapturedFrame
from notestream.models.session import GenerationRequest, RequestKind
from notestream.utils.exceptions import LLMError


async def stream_of(items):
    for item in items:
        yield item


@pytest.fixture
def ollama_backend():
    """Create Ollama backend for testing."""
    return OllamaBackend(host="http://localhost:11434", model="llava", timeout=120.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaBackend:
    """Test Ollama backend."""

    async def test_initialization(self, ollama_backend):
        assert ollama_backend.host == "http://localhost:11434"
        assert ollama_backend.model == "llava"
        assert ollama_backend.client is not None

    async def test_stream_text(self, ollama_backend):
        request = GenerationRequest(kind=RequestKind.ASK, text="Why?")
        parts = [
            {"message": {"content": "Because "}},
            {"message": {"content": ""}},
            {"message": {"content": "reasons."}},
        ]

        with patch.object(ollama_backend.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = stream_of(parts)

            result = [chunk async for chunk in ollama_backend.stream(request)]

            assert result == ["Because ", "reasons."]
            kwargs = mock_chat.call_args.kwargs
            assert kwargs["stream"] is True
            assert kwargs["options"] == {"temperature": 0.7, "num_predict": 2000}
            assert "images" not in kwargs["messages"][0]

    async def test_stream_with_image(self, ollama_backend):
        frame = CapturedFrame(data=b"jpeg")
        request = GenerationRequest(kind=RequestKind.DESCRIBE_IMAGE, text="What?", media=frame)

        with patch.object(ollama_backend.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = stream_of([{"message": {"content": "A cat"}}])

            result = [chunk async for chunk in ollama_backend.stream(request)]

            assert result == ["A cat"]
            assert mock_chat.call_args.kwargs["messages"][0]["images"] == [frame.base64_data]

    async def test_stream_rejects_audio(self, ollama_backend):
        request = GenerationRequest(kind=RequestKind.SUMMARIZE_AUDIO, media=AudioRecording(data=b"x"))

        with pytest.raises(LLMError, match="audio/webm"):
            async for _ in ollama_backend.stream(request):
                pass

    async def test_stream_error(self, ollama_backend):
        request = GenerationRequest(kind=RequestKind.ASK, text="Why?")

        with patch.object(ollama_backend.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.side_effect = Exception("connection refused")

            with pytest.raises(LLMError, match="Ollama API error"):
                async for _ in ollama_backend.stream(request):
                    pass

    async def test_generate_image_unsupported(self, ollama_backend):
        with pytest.raises(LLMError):
            await ollama_backend.generate_image("a red fox")
