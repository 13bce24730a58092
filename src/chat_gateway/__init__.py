"""
Chat Gateway

A provider-agnostic chat completion layer allowing:
- One canonical conversation format for every provider
- Model-to-provider routing from a configurable catalog
- Credential-gated provider availability
- Uniform error reporting across OpenAI, Anthropic, Gemini and Groq
"""

from .core.gateway import ChatGateway
from .core.config import GatewayConfig, load_config
from .core.catalog import ModelCatalog
from .core.credentials import CredentialGate
from .core.interface import ProviderAdapter
from .core.registry import AdapterRegistry
from .core.errors import (
    GatewayError,
    InvalidInputError,
    ModelNotFoundError,
    ProviderUnavailableError,
    UpstreamError,
)
from .models import ChatMessage, ModelDescriptor, Provider

__version__ = "1.0.0"

__all__ = [
    "ChatGateway",
    "GatewayConfig",
    "load_config",
    "ModelCatalog",
    "CredentialGate",
    "ProviderAdapter",
    "AdapterRegistry",
    "GatewayError",
    "InvalidInputError",
    "ModelNotFoundError",
    "ProviderUnavailableError",
    "UpstreamError",
    "ChatMessage",
    "ModelDescriptor",
    "Provider",
]
