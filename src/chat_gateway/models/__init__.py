"""
Chat gateway data models.
"""

from .message import ChatMessage, ChatRequest, Role, assistant_message
from .catalog import ModelDescriptor, Provider

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "Role",
    "assistant_message",
    "ModelDescriptor",
    "Provider",
]
