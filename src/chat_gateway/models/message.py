"""
Canonical conversation models shared by every provider.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """
    One conversation turn in provider-neutral form.

    Instances are immutable; a new sequence is built for every request.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Validated input to a single gateway chat call."""
    model_config = ConfigDict(extra="ignore")

    model: str = Field(..., min_length=1, description="Model identifier")
    messages: List[ChatMessage] = Field(..., description="Conversation messages")
    temperature: float = Field(default=0.7, ge=0, le=2)


def assistant_message(content: Optional[str]) -> ChatMessage:
    """Build a reply turn; missing content becomes the empty string."""
    return ChatMessage(role="assistant", content=content or "")
