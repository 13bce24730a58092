"""
Shared HTTP plumbing for provider adapters.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..core.interface import ProviderAdapter
from ..core.errors import (
    ProviderUnavailableError,
    UpstreamAuthenticationError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


class HTTPProviderAdapter(ProviderAdapter):
    """
    Base for adapters that call a provider's REST API with httpx.

    Subclasses supply the base URL, auth headers and request path; this
    class owns the client lifecycle and maps HTTP failures to
    UpstreamError subclasses.
    """

    DEFAULT_BASE_URL = ""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        max_tokens: int = 4096,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs,
    ):
        """
        Initialize adapter.

        Args:
            api_key: Provider API key
            base_url: API URL override
            timeout: Per-call timeout in seconds
            max_tokens: Output token bound sent with every request
            transport: Optional httpx transport (used to substitute the network)
        """
        self._api_key = api_key
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    @abstractmethod
    def _auth_headers(self) -> Dict[str, str]:
        """Provider-specific authentication headers."""

    async def connect(self) -> None:
        """Initialize HTTP client."""
        if self._client is not None:
            return

        if not self._api_key:
            raise ProviderUnavailableError(
                f"{self.provider.value} API key not configured",
                provider=self.provider.value,
            )

        headers = {"Content-Type": "application/json"}
        headers.update(self._auth_headers())

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.info(f"Connected to {self.provider.value} at {self._base_url}")

    async def disconnect(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info(f"Disconnected from {self.provider.value}")

    async def _post(self, path: str, payload: Dict[str, Any], model_id: str) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded body."""
        if not self._client:
            await self.connect()

        try:
            response = await self._client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Request to {self.provider.value} timed out: {e}",
                provider=self.provider.value,
                model=model_id,
            )
        except httpx.RequestError as e:
            raise UpstreamConnectionError(
                f"Request to {self.provider.value} failed: {e}",
                provider=self.provider.value,
                model=model_id,
            )

        self._check_response_errors(response, model_id)

        try:
            return response.json()
        except ValueError:
            raise UpstreamError(
                f"{self.provider.value} returned a non-JSON response",
                provider=self.provider.value,
                model=model_id,
                status_code=response.status_code,
            )

    def _check_response_errors(self, response: httpx.Response, model_id: str) -> None:
        """Check response for errors and raise appropriate exceptions."""
        if response.is_success:
            return

        detail = self._error_message(response)
        status = response.status_code
        provider = self.provider.value

        if status in (401, 403):
            raise UpstreamAuthenticationError(
                f"{provider} rejected the credential: {detail}",
                provider=provider,
                model=model_id,
                status_code=status,
            )

        if status == 429:
            retry_after = response.headers.get("retry-after")
            try:
                retry_after = float(retry_after) if retry_after else None
            except ValueError:
                retry_after = None
            raise UpstreamRateLimitError(
                f"{provider} rate limit exceeded: {detail}",
                provider=provider,
                model=model_id,
                retry_after=retry_after,
            )

        raise UpstreamError(
            f"{provider} request failed: {status} - {detail}",
            provider=provider,
            model=model_id,
            status_code=status,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull the vendor's human-readable message out of an error body."""
        try:
            data = response.json()
        except ValueError:
            return response.text[:500] or response.reason_phrase

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str):
                return error
            if data.get("message"):
                return str(data["message"])
        return str(data)[:500]
