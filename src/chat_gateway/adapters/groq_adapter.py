"""
Groq adapter.

Groq exposes an OpenAI-compatible chat completions endpoint, so only the
base URL and provider identity differ from the OpenAI adapter.
"""

from ..models.catalog import Provider
from .openai_adapter import OpenAIAdapter


class GroqAdapter(OpenAIAdapter):
    """Groq chat completions adapter."""

    DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

    @property
    def provider(self) -> Provider:
        return Provider.GROQ
