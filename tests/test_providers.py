"""Tests for the NIM provider against a stubbed OpenAI-compatible client."""

import asyncio
from types import SimpleNamespace

import pytest

from llm.providers.nim import ChatCompletionRequest, NIMProvider, strip_think_blocks


class StubCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _response(content=None, reasoning_content=None, model="served-model"):
    message = SimpleNamespace(content=content, reasoning_content=reasoning_content)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        model=model,
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=40),
    )


def _request(**kwargs):
    return ChatCompletionRequest(
        model="test/model",
        messages=[{"role": "system", "content": "s"}, {"role": "user", "content": "u"}],
        **kwargs,
    )


class TestNIMProvider:
    def test_guided_json_sent_as_nvext(self):
        completions = StubCompletions(_response(content='{"a": 1}'))
        provider = NIMProvider(client=_client(completions))
        schema = {"type": "object"}

        result = asyncio.run(provider.chat_completion(_request(temperature=0.1, max_tokens=400, guided_json=schema)))

        call = completions.calls[0]
        assert call["extra_body"] == {"nvext": {"guided_json": schema}}
        assert call["temperature"] == 0.1
        assert call["max_tokens"] == 400
        assert call["model"] == "test/model"
        assert result.content == '{"a": 1}'
        assert result.tokens_in == 120
        assert result.tokens_out == 40
        assert result.model == "served-model"

    def test_no_nvext_without_schema(self):
        completions = StubCompletions(_response(content="hello"))
        provider = NIMProvider(client=_client(completions))
        asyncio.run(provider.chat_completion(_request()))
        assert "extra_body" not in completions.calls[0]

    def test_guided_falls_back_to_reasoning_content(self):
        completions = StubCompletions(_response(content="", reasoning_content='{"b": 2}'))
        provider = NIMProvider(client=_client(completions))
        result = asyncio.run(provider.chat_completion(_request(guided_json={"type": "object"})))
        assert result.content == '{"b": 2}'

    def test_free_text_ignores_reasoning_content(self):
        completions = StubCompletions(_response(content="", reasoning_content="internal notes"))
        provider = NIMProvider(client=_client(completions))
        result = asyncio.run(provider.chat_completion(_request()))
        assert result.content == ""

    def test_free_text_strips_think_blocks(self):
        completions = StubCompletions(_response(content="<think>plan it</think>Here is your plan."))
        provider = NIMProvider(client=_client(completions))
        result = asyncio.run(provider.chat_completion(_request()))
        assert result.content == "Here is your plan."

    def test_empty_choices(self):
        completions = StubCompletions(SimpleNamespace(choices=[], model=None, usage=None))
        provider = NIMProvider(client=_client(completions))
        result = asyncio.run(provider.chat_completion(_request()))
        assert result.content == ""
        assert result.model == "test/model"

    def test_errors_propagate(self):
        completions = StubCompletions(error=RuntimeError("503 from upstream"))
        provider = NIMProvider(client=_client(completions))
        with pytest.raises(RuntimeError):
            asyncio.run(provider.chat_completion(_request()))

    def test_builds_openai_client(self):
        provider = NIMProvider(api_key="test-key", base_url="https://example.invalid/v1")
        assert provider.base_url == "https://example.invalid/v1"


class TestChatCompletionRequest:
    def test_rejects_unknown_role(self):
        with pytest.raises(ValueError):
            ChatCompletionRequest(model="m", messages=[{"role": "context", "content": "x"}])

    def test_with_temperature_copies(self):
        request = _request(temperature=0.1, guided_json={"type": "object"})
        retry = request.with_temperature(0.0)
        assert retry.temperature == 0.0
        assert request.temperature == 0.1
        assert retry.messages == request.messages
        assert retry.guided_json is request.guided_json


def test_strip_think_blocks_multiline():
    assert strip_think_blocks("<think>\na\nb\n</think>\nAnswer") == "Answer"


def test_free_text_output_is_filtered():
    completions = StubCompletions(_response(content="Deploy it at http://localhost:8000 with api_key=abc123"))
    provider = NIMProvider(client=_client(completions))
    result = asyncio.run(provider.chat_completion(_request()))
    assert "localhost" not in result.content
    assert "abc123" not in result.content
    assert result.metadata["redactions"] == 2


def test_guided_output_is_not_filtered():
    raw = '{"industry": "hosting on localhost"}'
    completions = StubCompletions(_response(content=raw))
    provider = NIMProvider(client=_client(completions))
    result = asyncio.run(provider.chat_completion(_request(guided_json={"type": "object"})))
    assert result.content == raw
    assert result.metadata["redactions"] == 0
