"""
Provider adapters for the chat gateway.
"""

from .base import HTTPProviderAdapter
from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter
from .gemini_adapter import GeminiAdapter
from .groq_adapter import GroqAdapter

__all__ = [
    "HTTPProviderAdapter",
    "OpenAIAdapter",
    "AnthropicAdapter",
    "GeminiAdapter",
    "GroqAdapter",
]
