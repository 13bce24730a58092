"""
Credential gate: which providers have a usable secret.
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional

from ..models.catalog import Provider

logger = logging.getLogger(__name__)


class CredentialGate:
    """
    Read-only snapshot of provider credentials.

    Built once from configuration at startup. Empty or whitespace-only
    secrets count as absent.
    """

    def __init__(self, credentials: Mapping[Provider, Optional[str]]):
        keys = {}
        for provider, secret in credentials.items():
            if secret and str(secret).strip():
                keys[Provider(provider)] = str(secret).strip()
        self._keys = MappingProxyType(keys)
        logger.info(
            f"Credential gate ready: {[p.value for p in self.available_providers()] or 'no providers'}"
        )

    def is_available(self, provider: Provider) -> bool:
        """Check whether a provider has a credential."""
        return Provider(provider) in self._keys

    def api_key(self, provider: Provider) -> Optional[str]:
        """Secret for a provider, or None when absent."""
        return self._keys.get(Provider(provider))

    def available_providers(self) -> List[Provider]:
        """Credentialed providers in declaration order."""
        return [p for p in Provider if p in self._keys]

    def __repr__(self) -> str:
        names = [p.value for p in self.available_providers()]
        return f"{self.__class__.__name__}(available={names!r})"
