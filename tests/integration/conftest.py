"""
Shared fixtures for chat gateway tests.

Upstream providers are simulated with httpx.MockTransport so every adapter
runs its real request/response code without network access.
"""

import json
from typing import Any, Dict, List

import httpx
import pytest

from chat_gateway.core.config import GatewayConfig
from chat_gateway.core.credentials import CredentialGate
from chat_gateway.core.gateway import ChatGateway
from chat_gateway.core.registry import create_default_registry
from chat_gateway.models.catalog import Provider


OPENAI_HOST = "api.openai.com"
ANTHROPIC_HOST = "api.anthropic.com"
GEMINI_HOST = "generativelanguage.googleapis.com"
GROQ_HOST = "api.groq.com"


def openai_reply(text: Any) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}
        ],
    }


def anthropic_reply(text: str) -> Dict[str, Any]:
    return {
        "id": "msg_123",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
    }


def gemini_reply(text: str) -> Dict[str, Any]:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
        ]
    }


REPLY_BUILDERS = {
    OPENAI_HOST: openai_reply,
    ANTHROPIC_HOST: anthropic_reply,
    GEMINI_HOST: gemini_reply,
    GROQ_HOST: openai_reply,
}


class FakeUpstream:
    """Records requests and answers as the provider owning the host would."""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.replies: Dict[str, str] = {}
        self.failures: Dict[str, Any] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.requests.append({
            "host": host,
            "path": request.url.path,
            "headers": request.headers,
            "json": json.loads(request.content) if request.content else None,
        })

        failure = self.failures.get(host)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            status, payload = failure
            return httpx.Response(status, json=payload)

        text = self.replies.get(host, f"reply from {host}")
        return httpx.Response(200, json=REPLY_BUILDERS[host](text))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last(self, host: str) -> Dict[str, Any]:
        matching = [r for r in self.requests if r["host"] == host]
        assert matching, f"no request sent to {host}"
        return matching[-1]


def make_config(*providers: Provider, **kwargs) -> GatewayConfig:
    """Config with a test key for each listed provider."""
    credentials = {p: f"test-{p.value}-key" for p in providers}
    return GatewayConfig(credentials=credentials, **kwargs)


def make_gateway(config: GatewayConfig, upstream: FakeUpstream) -> ChatGateway:
    """Gateway whose built-in adapters talk to the fake upstream."""
    registry = create_default_registry(
        CredentialGate(config.credentials),
        adapter_options={
            "timeout": config.timeout,
            "max_tokens": config.max_tokens,
            "transport": upstream.transport,
        },
        base_urls=dict(config.base_urls),
    )
    return ChatGateway(config, registry=registry)


@pytest.fixture
def upstream() -> FakeUpstream:
    """Fake provider APIs."""
    return FakeUpstream()


@pytest.fixture
def all_providers_config() -> GatewayConfig:
    """Config with credentials for every provider."""
    return make_config(*Provider)


@pytest.fixture
def gateway(all_providers_config, upstream) -> ChatGateway:
    """Gateway with every provider available."""
    return make_gateway(all_providers_config, upstream)


@pytest.fixture
def conversation() -> List[Dict[str, str]]:
    """A conversation with a system prompt and one completed exchange."""
    return [
        {"role": "system", "content": "You are helpful"},
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello! How can I help?"},
        {"role": "user", "content": "Tell me a joke"},
    ]
