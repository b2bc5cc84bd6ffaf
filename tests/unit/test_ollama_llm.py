"""Unit tests for OllamaLLM.agenerate with a mocked LangChain client."""
from __future__ import annotations

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from infra.llm.ollama import OllamaLLM


@pytest.mark.unit
class TestOllamaLLM:
    """Wrapper behaviour only; no Ollama server is contacted."""

    @pytest.mark.asyncio
    async def test_agenerate_returns_text(self):
        mock_client = MagicMock()
        mock_client.ainvoke = AsyncMock(return_value="Keep going!")

        with patch("infra.llm.ollama.LangChainOllamaLLM", return_value=mock_client) as factory:
            llm = OllamaLLM(model="test", base_url="http://ollama:11434")
            result = await llm.agenerate("prompt", timeout=5.0)

        assert result == "Keep going!"
        factory.assert_called_once_with(model="test", temperature=0.7, base_url="http://ollama:11434")
        mock_client.ainvoke.assert_called_once_with("prompt")

    @pytest.mark.asyncio
    async def test_agenerate_unwraps_message_content(self):
        message = MagicMock()
        message.content = "from a chat message"
        mock_client = MagicMock()
        mock_client.ainvoke = AsyncMock(return_value=message)

        with patch("infra.llm.ollama.LangChainOllamaLLM", return_value=mock_client):
            result = await OllamaLLM(model="test").agenerate("prompt")

        assert result == "from a chat message"

    @pytest.mark.asyncio
    async def test_agenerate_times_out(self):
        async def slow(_prompt):
            await asyncio.sleep(1)
            return "late"

        mock_client = MagicMock()
        mock_client.ainvoke = slow

        with patch("infra.llm.ollama.LangChainOllamaLLM", return_value=mock_client):
            llm = OllamaLLM(model="test")
            with pytest.raises(TimeoutError, match="timed out"):
                await llm.agenerate("prompt", timeout=0.01)

    @pytest.mark.asyncio
    async def test_agenerate_propagates_client_errors(self):
        mock_client = MagicMock()
        mock_client.ainvoke = AsyncMock(side_effect=ConnectionError("refused"))

        with patch("infra.llm.ollama.LangChainOllamaLLM", return_value=mock_client):
            with pytest.raises(ConnectionError):
                await OllamaLLM(model="test").agenerate("prompt")
