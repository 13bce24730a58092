"""
Google Gemini API adapter.

Talks to the Generative Language API. The translated request carries the
paired (user, model) history and a single outgoing user message; both are
sent together as the `contents` list of a generateContent call.
"""

from typing import Any, Dict

from ..models.catalog import Provider
from .base import HTTPProviderAdapter


class GeminiAdapter(HTTPProviderAdapter):
    """
    Google Gemini adapter.

    Authentication via API key header; no service account support.
    """

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    @property
    def provider(self) -> Provider:
        return Provider.GOOGLE

    def _auth_headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self._api_key}

    def build_payload(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        contents = list(vendor_request.get("history", []))
        contents.append({
            "role": "user",
            "parts": [{"text": vendor_request.get("message", "")}],
        })
        return {
            "contents": contents,
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": self._max_tokens,
            },
        }

    async def complete(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        """Generate content via the Gemini API."""
        payload = self.build_payload(vendor_request, model_id, temperature)
        return await self._post(f"/models/{model_id}:generateContent", payload, model_id)
