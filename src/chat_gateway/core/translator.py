"""
Message translation between the canonical conversation and each provider's
native request/response shape.

Each provider has one pure request rule and one pure response rule, looked up
from a dispatch table keyed by Provider.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..models.catalog import Provider
from ..models.message import ChatMessage, assistant_message


class GeminiSystemPolicy(str, Enum):
    """What to do with system messages for a provider that has no system role."""
    DROP = "drop"
    MERGE = "merge"


def _openai_request(messages: Sequence[ChatMessage], **_) -> Dict[str, Any]:
    """Roles and order pass through unchanged; system turns stay inline."""
    return {
        "messages": [{"role": m.role, "content": m.content} for m in messages],
    }


def _anthropic_request(messages: Sequence[ChatMessage], **_) -> Dict[str, Any]:
    """
    Extract the first system message into a top-level field.

    Later system messages are dropped; only user and assistant turns remain
    in the conversation body.
    """
    system = next((m.content for m in messages if m.role == "system"), None)
    data: Dict[str, Any] = {
        "messages": [
            {"role": m.role, "content": m.content}
            for m in messages
            if m.role != "system"
        ],
    }
    if system:
        data["system"] = system
    return data


def _gemini_request(
    messages: Sequence[ChatMessage],
    system_policy: GeminiSystemPolicy = GeminiSystemPolicy.DROP,
    **_,
) -> Dict[str, Any]:
    """
    Restructure the conversation into (user, model) history plus one outgoing
    user message.

    An assistant turn flushes the pending user turn into history before
    itself. The user turn still pending at the end is sent as the message
    rather than stored in history.

    With the merge policy the system text is prepended to the first user
    turn that is actually sent, whether it lands in history or becomes the
    outgoing message.
    """
    prefix = ""
    if system_policy == GeminiSystemPolicy.MERGE:
        prefix = _join_text(m.content for m in messages if m.role == "system")

    history: List[Dict[str, Any]] = []
    pending = ""

    for msg in messages:
        if msg.role == "system":
            continue
        if msg.role == "user":
            pending = msg.content
        elif msg.role == "assistant":
            if pending or prefix:
                history.append(_gemini_turn("user", _join_text([prefix, pending])))
                pending = prefix = ""
            history.append(_gemini_turn("model", msg.content))

    return {"history": history, "message": _join_text([prefix, pending])}


def _gemini_turn(role: str, text: str) -> Dict[str, Any]:
    return {"role": role, "parts": [{"text": text}]}


def _join_text(parts) -> str:
    return "\n\n".join(p for p in parts if p)


def _openai_response(data: Dict[str, Any]) -> ChatMessage:
    choices = data.get("choices") or []
    if not choices:
        return assistant_message(None)
    message = choices[0].get("message") or {}
    return assistant_message(message.get("content"))


def _anthropic_response(data: Dict[str, Any]) -> ChatMessage:
    content = ""
    for block in data.get("content") or []:
        if block.get("type", "text") == "text":
            content += block.get("text") or ""
    return assistant_message(content)


def _gemini_response(data: Dict[str, Any]) -> ChatMessage:
    candidates = data.get("candidates") or []
    if not candidates:
        return assistant_message(None)
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return assistant_message("".join(p.get("text") or "" for p in parts))


REQUEST_RULES: Dict[Provider, Callable[..., Dict[str, Any]]] = {
    Provider.OPENAI: _openai_request,
    Provider.ANTHROPIC: _anthropic_request,
    Provider.GOOGLE: _gemini_request,
    Provider.GROQ: _openai_request,
}

RESPONSE_RULES: Dict[Provider, Callable[[Dict[str, Any]], ChatMessage]] = {
    Provider.OPENAI: _openai_response,
    Provider.ANTHROPIC: _anthropic_response,
    Provider.GOOGLE: _gemini_response,
    Provider.GROQ: _openai_response,
}


def to_vendor_format(
    provider: Provider,
    messages: Sequence[ChatMessage],
    system_policy: GeminiSystemPolicy = GeminiSystemPolicy.DROP,
) -> Dict[str, Any]:
    """
    Convert a canonical conversation into the provider's request fragment.

    Args:
        provider: Target provider
        messages: Canonical conversation in turn order
        system_policy: System message handling for Gemini

    Returns:
        Provider-specific fields; model and sampling parameters are added
        by the adapter.
    """
    rule = REQUEST_RULES[Provider(provider)]
    return rule(list(messages), system_policy=GeminiSystemPolicy(system_policy))


def from_vendor_format(provider: Provider, response: Optional[Dict[str, Any]]) -> ChatMessage:
    """
    Reduce a raw provider response to one assistant message.

    Content is always a string; an empty or missing reply becomes "".
    """
    rule = RESPONSE_RULES[Provider(provider)]
    return rule(response or {})


def to_canonical(provider: Provider, vendor_request: Dict[str, Any]) -> List[ChatMessage]:
    """
    Rebuild canonical messages from a translated request.

    The inverse of to_vendor_format up to what the provider format can
    represent: Anthropic yields the system field first, Gemini maps "model"
    back to "assistant" and appends the outgoing message.
    """
    provider = Provider(provider)
    messages: List[ChatMessage] = []

    if provider == Provider.GOOGLE:
        for turn in vendor_request.get("history", []):
            text = "".join(p.get("text", "") for p in turn.get("parts", []))
            role = "assistant" if turn.get("role") == "model" else "user"
            messages.append(ChatMessage(role=role, content=text))
        if vendor_request.get("message"):
            messages.append(ChatMessage(role="user", content=vendor_request["message"]))
        return messages

    if provider == Provider.ANTHROPIC and vendor_request.get("system"):
        messages.append(ChatMessage(role="system", content=vendor_request["system"]))

    for m in vendor_request.get("messages", []):
        messages.append(ChatMessage(role=m["role"], content=m["content"]))
    return messages
