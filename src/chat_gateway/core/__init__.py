"""
Core chat gateway components.
"""

from .interface import ProviderAdapter
from .registry import AdapterRegistry, create_default_registry
from .config import GatewayConfig, load_config
from .credentials import CredentialGate
from .catalog import ModelCatalog, DEFAULT_MODELS, load_vendor_models
from .translator import GeminiSystemPolicy, from_vendor_format, to_canonical, to_vendor_format
from .gateway import ChatGateway
from .errors import (
    GatewayError,
    InvalidInputError,
    ModelNotFoundError,
    ProviderUnavailableError,
    UpstreamError,
    DuplicateModelError,
)

__all__ = [
    "ProviderAdapter",
    "AdapterRegistry",
    "create_default_registry",
    "GatewayConfig",
    "load_config",
    "CredentialGate",
    "ModelCatalog",
    "DEFAULT_MODELS",
    "load_vendor_models",
    "GeminiSystemPolicy",
    "from_vendor_format",
    "to_canonical",
    "to_vendor_format",
    "ChatGateway",
    "GatewayError",
    "InvalidInputError",
    "ModelNotFoundError",
    "ProviderUnavailableError",
    "UpstreamError",
    "DuplicateModelError",
]
