"""
Abstract provider adapter interface.

Defines the contract that every provider adapter must implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..models.catalog import Provider


class ProviderAdapter(ABC):
    """
    Abstract base class for provider adapters.

    An adapter wraps one vendor's chat-completion call. It holds no
    per-request state, so one instance serves concurrent requests.
    """

    @property
    @abstractmethod
    def provider(self) -> Provider:
        """
        Provider this adapter talks to.

        Returns:
            Provider enum value
        """
        pass

    @property
    def is_connected(self) -> bool:
        """
        Check if the adapter has an open client.

        Returns:
            True if connected
        """
        return True

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the underlying client.

        Called lazily on first use.
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Release the underlying client.

        Called during cleanup.
        """
        pass

    @abstractmethod
    async def complete(
        self,
        vendor_request: Dict[str, Any],
        model_id: str,
        temperature: float,
    ) -> Dict[str, Any]:
        """
        Complete one chat turn.

        Args:
            vendor_request: Conversation already translated for this provider
            model_id: Provider model identifier
            temperature: Sampling temperature

        Returns:
            Raw provider response body
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider.value!r})"
