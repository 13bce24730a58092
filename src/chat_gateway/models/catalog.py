"""
Provider and model catalog models.
"""

from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """Upstream chat-completion vendors the gateway can route to."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"


class ModelDescriptor(BaseModel):
    """A routable model and the provider that owns it."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, description="Display name")
    provider: str = Field(..., min_length=1, description="Display label of the provider")
    vendor: Provider

    def public_dict(self) -> Dict[str, Any]:
        """Shape advertised to clients choosing a model."""
        return {"id": self.id, "name": self.name, "provider": self.provider}
