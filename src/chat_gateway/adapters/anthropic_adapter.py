"""
Direct Anthropic API adapter.

Provides access to Anthropic's Messages API. The system prompt travels in
a top-level field rather than inside the conversation.
"""

from typing import Any, Dict

from ..models.catalog import Provider
from .base import HTTPProviderAdapter


class AnthropicAdapter(HTTPProviderAdapter):
    """Anthropic Messages API adapter."""

    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    ANTHROPIC_VERSION = "2023-06-01"

    @property
    def provider(self) -> Provider:
        return Provider.ANTHROPIC

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": self.ANTHROPIC_VERSION,
        }

    def build_payload(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        data = {
            "model": model_id,
            "messages": vendor_request["messages"],
            "max_tokens": self._max_tokens,
            "temperature": temperature,
        }
        if vendor_request.get("system"):
            data["system"] = vendor_request["system"]
        return data

    async def complete(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        """Create a message via the Anthropic API."""
        payload = self.build_payload(vendor_request, model_id, temperature)
        return await self._post("/messages", payload, model_id)
