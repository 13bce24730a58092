"""
Tests for chat gateway orchestration: routing, availability gating,
input validation and error mapping.
"""

import asyncio
from typing import Any, Dict

import pytest

from chat_gateway.core.credentials import CredentialGate
from chat_gateway.core.errors import (
    InvalidInputError,
    ModelNotFoundError,
    ProviderUnavailableError,
    UpstreamError,
    UpstreamTimeoutError,
)
from chat_gateway.core.gateway import ChatGateway
from chat_gateway.core.interface import ProviderAdapter
from chat_gateway.core.registry import AdapterRegistry
from chat_gateway.models.catalog import Provider
from chat_gateway.models.message import ChatMessage

from conftest import ANTHROPIC_HOST, GEMINI_HOST, GROQ_HOST, OPENAI_HOST, make_config, make_gateway


class StubAdapter(ProviderAdapter):
    """In-memory adapter standing in for a provider."""

    def __init__(self, provider: Provider, reply: Dict[str, Any] = None, delay: float = 0, error: Exception = None):
        self._provider = provider
        self._reply = reply or {}
        self._delay = delay
        self._error = error
        self.calls = []
        self.closed = False

    @property
    def provider(self) -> Provider:
        return self._provider

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        self.closed = True

    async def complete(self, vendor_request, model_id, temperature):
        self.calls.append((vendor_request, model_id, temperature))
        await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._reply


def stub_gateway(config, *adapters) -> ChatGateway:
    registry = AdapterRegistry(CredentialGate(config.credentials))
    for adapter in adapters:
        registry.register_instance(adapter)
    return ChatGateway(config, registry=registry)


class TestRouting:
    """Requests reach the provider that owns the model."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("model_id, host", [
        ("gpt-4o", OPENAI_HOST),
        ("claude-3-5-sonnet-20241022", ANTHROPIC_HOST),
        ("gemini-1.5-pro", GEMINI_HOST),
        ("llama-3.3-70b-versatile", GROQ_HOST),
    ])
    async def test_reply_is_assistant_message(self, gateway, upstream, conversation, model_id, host):
        upstream.replies[host] = "Why did the chicken cross the road?"

        reply = await gateway.chat(conversation, model_id, 0.7)

        assert reply == ChatMessage(role="assistant", content="Why did the chicken cross the road?")
        assert [r["host"] for r in upstream.requests] == [host]
        await gateway.close()

    @pytest.mark.asyncio
    async def test_anthropic_receives_extracted_system(self, gateway, upstream, conversation):
        await gateway.chat(conversation, "claude-3-5-haiku-20241022", 0.2)

        sent = upstream.last(ANTHROPIC_HOST)["json"]
        assert sent["system"] == "You are helpful"
        assert [m["role"] for m in sent["messages"]] == ["user", "assistant", "user"]
        assert sent["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_gemini_receives_paired_history(self, gateway, upstream, conversation):
        await gateway.chat(conversation, "gemini-1.5-flash", 0.7)

        contents = upstream.last(GEMINI_HOST)["json"]["contents"]
        assert [(c["role"], c["parts"][0]["text"]) for c in contents] == [
            ("user", "Hi"),
            ("model", "Hello! How can I help?"),
            ("user", "Tell me a joke"),
        ]

    @pytest.mark.asyncio
    async def test_defaults_applied(self, gateway, upstream):
        await gateway.chat([{"role": "user", "content": "Hi"}])

        sent = upstream.last(OPENAI_HOST)["json"]
        assert sent["model"] == "gpt-4o-mini"
        assert sent["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_accepts_canonical_message_objects(self, gateway, upstream):
        reply = await gateway.chat([ChatMessage(role="user", content="Hi")], "gpt-4o")
        assert reply.role == "assistant"

    @pytest.mark.asyncio
    async def test_null_content_normalized(self, gateway, upstream):
        upstream.replies[OPENAI_HOST] = None
        reply = await gateway.chat([{"role": "user", "content": "Hi"}], "gpt-4o")
        assert reply.content == ""

    def test_list_models_reflects_credentials(self, upstream):
        gateway = make_gateway(make_config(Provider.GOOGLE), upstream)
        assert {m.vendor for m in gateway.list_models()} == {Provider.GOOGLE}


class TestFailures:
    """Each failure ends the request with exactly one error kind."""

    @pytest.mark.asyncio
    async def test_unknown_model(self, gateway, upstream):
        with pytest.raises(ModelNotFoundError) as exc_info:
            await gateway.chat([{"role": "user", "content": "Hi"}], "gpt-17")
        assert exc_info.value.kind == "not_found"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_known_model_without_credential(self, upstream):
        gateway = make_gateway(make_config(Provider.OPENAI), upstream)

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await gateway.chat([{"role": "user", "content": "Hi"}], "claude-3-opus-20240229")

        error = exc_info.value
        assert error.kind == "unavailable"
        assert not isinstance(error, ModelNotFoundError)
        assert error.provider == "anthropic"
        assert upstream.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("messages", [
        "hello",
        None,
        {"role": "user", "content": "Hi"},
        [{"role": "user"}],
        [{"role": "tool", "content": "Hi"}],
        [{"role": "user", "content": 42}],
        ["Hi"],
    ])
    async def test_malformed_messages(self, gateway, upstream, messages):
        with pytest.raises(InvalidInputError) as exc_info:
            await gateway.chat(messages, "gpt-4o")
        assert exc_info.value.kind == "invalid_input"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_temperature_out_of_range(self, gateway):
        with pytest.raises(InvalidInputError):
            await gateway.chat([{"role": "user", "content": "Hi"}], "gpt-4o", 3.5)

    @pytest.mark.asyncio
    async def test_invalid_input_checked_before_model_lookup(self, gateway):
        with pytest.raises(InvalidInputError):
            await gateway.chat("not a list", "no-such-model")

    @pytest.mark.asyncio
    async def test_upstream_failure_carries_vendor_message(self, gateway, upstream):
        upstream.failures[GROQ_HOST] = (500, {"error": {"message": "internal server error"}})

        with pytest.raises(UpstreamError) as exc_info:
            await gateway.chat([{"role": "user", "content": "Hi"}], "mixtral-8x7b-32768")

        result = exc_info.value.to_dict()
        assert result["type"] == "upstream_failure"
        assert "internal server error" in result["message"]
        assert "Traceback" not in result["message"]
        assert result["provider"] == "groq"
        assert result["model"] == "mixtral-8x7b-32768"

    @pytest.mark.asyncio
    async def test_unexpected_adapter_exception_wrapped(self):
        config = make_config(Provider.OPENAI)
        broken = StubAdapter(Provider.OPENAI, error=KeyError("choices"))
        gateway = stub_gateway(config, broken)

        with pytest.raises(UpstreamError) as exc_info:
            await gateway.chat([{"role": "user", "content": "Hi"}], "gpt-4o")
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_unexpected_response_shape(self):
        config = make_config(Provider.GROQ)
        odd = StubAdapter(Provider.GROQ, reply={"choices": ["not a choice object"]})
        gateway = stub_gateway(config, odd)

        with pytest.raises(UpstreamError) as exc_info:
            await gateway.chat([{"role": "user", "content": "Hi"}], "mixtral-8x7b-32768")
        assert "unexpected response" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_call_timeout(self):
        config = make_config(Provider.ANTHROPIC, timeout=0.05)
        slow = StubAdapter(Provider.ANTHROPIC, reply={"content": []}, delay=1)
        gateway = stub_gateway(config, slow)

        with pytest.raises(UpstreamTimeoutError):
            await gateway.chat([{"role": "user", "content": "Hi"}], "claude-3-opus-20240229")


class TestConcurrency:
    """Concurrent requests to different providers are independent."""

    @pytest.mark.asyncio
    async def test_failure_in_one_provider_does_not_affect_another(self):
        config = make_config(Provider.OPENAI, Provider.GOOGLE)
        failing = StubAdapter(
            Provider.OPENAI,
            delay=0.01,
            error=UpstreamError("openai request failed: 500", provider="openai"),
        )
        healthy = StubAdapter(
            Provider.GOOGLE,
            reply={"candidates": [{"content": {"parts": [{"text": "still here"}]}}]},
            delay=0.02,
        )
        gateway = stub_gateway(config, failing, healthy)

        results = await asyncio.gather(
            gateway.chat([{"role": "user", "content": "a"}], "gpt-4o"),
            gateway.chat([{"role": "user", "content": "b"}], "gemini-1.5-pro"),
            return_exceptions=True,
        )

        assert isinstance(results[0], UpstreamError)
        assert results[1] == ChatMessage(role="assistant", content="still here")
        assert healthy.calls[0][0] == {"history": [], "message": "b"}

    @pytest.mark.asyncio
    async def test_many_concurrent_requests(self, gateway, upstream):
        models = ["gpt-4o", "claude-3-opus-20240229", "gemini-1.5-flash", "llama-3.1-70b-versatile"]
        replies = await asyncio.gather(*[
            gateway.chat([{"role": "user", "content": f"q{i}"}], models[i % len(models)])
            for i in range(20)
        ])
        assert all(r.role == "assistant" for r in replies)
        assert len(upstream.requests) == 20

    @pytest.mark.asyncio
    async def test_close_disconnects_adapters(self):
        config = make_config(Provider.OPENAI)
        adapter = StubAdapter(Provider.OPENAI, reply={"choices": []})
        gateway = stub_gateway(config, adapter)

        await gateway.chat([{"role": "user", "content": "Hi"}], "gpt-4o")
        await gateway.close()
        assert adapter.closed
