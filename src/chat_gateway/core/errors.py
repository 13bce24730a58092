"""
Chat gateway error types.

Every request-handling failure surfaces as one of four kinds:
invalid_input, not_found, unavailable and upstream_failure.
"""

from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    kind = "gateway_error"

    def __init__(self, message: str, provider: str = None, model: str = None):
        self.message = message
        self.provider = provider
        self.model = model
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured error result safe to hand back to callers."""
        return {
            "type": self.kind,
            "message": self.message,
            "provider": self.provider,
            "model": self.model,
        }


class InvalidInputError(GatewayError):
    """Raised when the request is not a well-formed conversation."""
    kind = "invalid_input"


class ModelNotFoundError(GatewayError):
    """Raised when no provider's catalog lists the requested model."""
    kind = "not_found"


class ProviderUnavailableError(GatewayError):
    """Raised when the model exists but its provider has no credential."""
    kind = "unavailable"


class UpstreamError(GatewayError):
    """Raised when the provider call fails."""
    kind = "upstream_failure"

    def __init__(
        self,
        message: str,
        provider: str = None,
        model: str = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, provider, model)
        self.status_code = status_code


class UpstreamConnectionError(UpstreamError):
    """Raised when connection to the provider fails."""
    pass


class UpstreamTimeoutError(UpstreamError):
    """Raised when the provider call times out."""
    pass


class UpstreamAuthenticationError(UpstreamError):
    """Raised when the provider rejects the credential."""
    pass


class UpstreamRateLimitError(UpstreamError):
    """Raised when the provider reports quota or rate limit exhaustion."""

    def __init__(
        self,
        message: str,
        provider: str = None,
        model: str = None,
        status_code: Optional[int] = 429,
        retry_after: float = None,
    ):
        super().__init__(message, provider, model, status_code)
        self.retry_after = retry_after


class ConfigInvalidError(Exception):
    """Raised internally when a model override fails validation."""
    pass


class DuplicateModelError(Exception):
    """Raised when two providers register the same model id."""

    def __init__(self, model_id: str, providers):
        self.model_id = model_id
        self.providers = list(providers)
        super().__init__(
            f"Model id {model_id!r} is registered by more than one provider: "
            f"{', '.join(self.providers)}"
        )
