"""Tests for the OpenAI inference adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from kitchly.config import Settings
from kitchly.llm import OpenAIInference, build_inference


def make_openai_client(content: str | None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
        )
    )
    return client


class TestOpenAIInference:
    """Tests for model selection and reply extraction."""

    @pytest.mark.asyncio
    async def test_large_model_by_default(self):
        client = make_openai_client('{"title": "Soup"}')
        inference = OpenAIInference(large_model="big", small_model="tiny", client=client)

        reply = await inference.complete("make soup")

        assert reply == '{"title": "Soup"}'
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "big"
        assert kwargs["messages"] == [{"role": "user", "content": "make soup"}]

    @pytest.mark.asyncio
    async def test_small_model(self):
        client = make_openai_client("NEXT")
        inference = OpenAIInference(large_model="big", small_model="tiny", client=client)

        await inference.complete("navigate", size="small")

        assert client.chat.completions.create.await_args.kwargs["model"] == "tiny"

    @pytest.mark.asyncio
    async def test_empty_content(self):
        """Test a missing message body reads as an empty reply."""
        inference = OpenAIInference(client=make_openai_client(None))
        assert await inference.complete("hello") == ""


def test_build_inference_disabled_without_key():
    """Test generation is disabled when no key is configured."""
    assert build_inference(Settings(openai_api_key="")) is None
