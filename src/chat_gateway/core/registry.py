"""
Adapter registry mapping providers to their adapter implementations.
"""

import logging
from typing import Any, Dict, Optional, Type

from ..models.catalog import Provider
from .credentials import CredentialGate
from .errors import ProviderUnavailableError
from .interface import ProviderAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Registry for provider adapters.

    Holds one adapter class per provider and lazily creates a single
    instance per credentialed provider. A provider without a credential
    gets no instance, so its absence cannot affect other providers.
    """

    def __init__(
        self,
        credentials: CredentialGate,
        adapter_options: Optional[Dict[str, Any]] = None,
        base_urls: Optional[Dict[Provider, str]] = None,
    ):
        """
        Initialize the registry.

        Args:
            credentials: Gate supplying per-provider API keys
            adapter_options: Keyword arguments passed to every adapter
                (timeout, max_tokens, transport)
            base_urls: Optional per-provider API URL overrides
        """
        self._credentials = credentials
        self._options = dict(adapter_options or {})
        self._base_urls = dict(base_urls or {})
        self._adapters: Dict[Provider, Type[ProviderAdapter]] = {}
        self._instances: Dict[Provider, ProviderAdapter] = {}

    def register_adapter(
        self,
        provider: Provider,
        adapter_class: Type[ProviderAdapter]
    ) -> None:
        """
        Register an adapter class for a provider.

        Args:
            provider: Provider handled by the class
            adapter_class: Adapter class to register
        """
        self._adapters[Provider(provider)] = adapter_class
        logger.info(f"Registered provider adapter: {Provider(provider).value}")

    def register_instance(self, adapter: ProviderAdapter) -> None:
        """Use a prebuilt adapter for its provider."""
        self._instances[adapter.provider] = adapter

    def get_adapter(self, provider: Provider) -> ProviderAdapter:
        """
        Get the adapter instance for a provider, creating it on first use.

        Raises:
            ProviderUnavailableError: If the provider has no credential or
                no adapter is registered for it
        """
        provider = Provider(provider)
        if provider in self._instances:
            return self._instances[provider]

        if not self._credentials.is_available(provider):
            raise ProviderUnavailableError(
                f"{provider.value} API key not configured",
                provider=provider.value,
            )
        if provider not in self._adapters:
            raise ProviderUnavailableError(
                f"No adapter registered for {provider.value}",
                provider=provider.value,
            )

        config = dict(self._options)
        config["api_key"] = self._credentials.api_key(provider)
        if provider in self._base_urls:
            config["base_url"] = self._base_urls[provider]

        instance = self._adapters[provider](**config)
        self._instances[provider] = instance
        logger.info(f"Created adapter instance for {provider.value}")
        return instance

    async def disconnect_all(self) -> None:
        """Disconnect all created adapters."""
        for adapter in self._instances.values():
            try:
                await adapter.disconnect()
            except Exception as e:
                logger.error(f"Failed to disconnect adapter {adapter!r}: {e}")


def create_default_registry(
    credentials: CredentialGate,
    adapter_options: Optional[Dict[str, Any]] = None,
    base_urls: Optional[Dict[Provider, str]] = None,
) -> AdapterRegistry:
    """Registry with the built-in adapter for every provider."""
    from ..adapters import AnthropicAdapter, GeminiAdapter, GroqAdapter, OpenAIAdapter

    registry = AdapterRegistry(credentials, adapter_options, base_urls)
    registry.register_adapter(Provider.OPENAI, OpenAIAdapter)
    registry.register_adapter(Provider.ANTHROPIC, AnthropicAdapter)
    registry.register_adapter(Provider.GOOGLE, GeminiAdapter)
    registry.register_adapter(Provider.GROQ, GroqAdapter)
    return registry
