"""
Direct OpenAI API adapter.
"""

from typing import Any, Dict

from ..models.catalog import Provider
from .base import HTTPProviderAdapter


class OpenAIAdapter(HTTPProviderAdapter):
    """
    OpenAI chat completions adapter.

    The translated conversation is sent as-is; system turns stay inline.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    @property
    def provider(self) -> Provider:
        return Provider.OPENAI

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def build_payload(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        return {
            "model": model_id,
            "messages": vendor_request["messages"],
            "temperature": temperature,
            "max_tokens": self._max_tokens,
        }

    async def complete(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        """Create a chat completion via the OpenAI-style API."""
        payload = self.build_payload(vendor_request, model_id, temperature)
        return await self._post("/chat/completions", payload, model_id)
