"""
Chat gateway orchestration.

A request moves through Received -> Resolved -> Translated -> Invoked ->
Normalized -> Returned; any step can end it with a single GatewayError.
"""

import asyncio
import logging
from typing import Any, List, Optional, Sequence

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from ..models.catalog import ModelDescriptor
from ..models.message import ChatMessage, ChatRequest
from .catalog import ModelCatalog
from .config import GatewayConfig
from .credentials import CredentialGate
from .errors import (
    GatewayError,
    InvalidInputError,
    ProviderUnavailableError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .registry import AdapterRegistry, create_default_registry
from .translator import from_vendor_format, to_vendor_format

logger = logging.getLogger(__name__)

tracer = trace.get_tracer(__name__)


class ChatGateway:
    """
    Routes a canonical conversation to the provider that owns the model.

    The gateway holds only read-only state (configuration, credentials,
    catalog) plus one adapter per provider, so concurrent chat calls do not
    interact.
    """

    def __init__(
        self,
        config: GatewayConfig,
        registry: Optional[AdapterRegistry] = None,
    ):
        """
        Initialize the gateway.

        Args:
            config: Read-only gateway configuration
            registry: Adapter registry; the built-in adapters are used if None

        Raises:
            DuplicateModelError: If two providers list the same model id
        """
        self._config = config
        self._credentials = CredentialGate(config.credentials)
        self._catalog = ModelCatalog(self._credentials, config.model_overrides)
        self._registry = registry or create_default_registry(
            self._credentials,
            adapter_options={"timeout": config.timeout, "max_tokens": config.max_tokens},
            base_urls=dict(config.base_urls),
        )

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog

    @property
    def credentials(self) -> CredentialGate:
        return self._credentials

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def list_models(self) -> List[ModelDescriptor]:
        """Models routable with the configured credentials."""
        return self._catalog.list_models()

    async def chat(
        self,
        messages: Sequence[Any],
        model_id: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> ChatMessage:
        """
        Complete one chat turn.

        Args:
            messages: Ordered conversation of role/content pairs
            model_id: Requested model; the configured default if empty
            temperature: Sampling temperature; the configured default if None

        Returns:
            Assistant reply as a canonical message

        Raises:
            InvalidInputError: If the conversation is malformed
            ModelNotFoundError: If no provider lists the model
            ProviderUnavailableError: If the model's provider has no credential
            UpstreamError: If the provider call fails
        """
        model_id = model_id or self._config.default_model

        with tracer.start_as_current_span("chat_gateway.chat") as span:
            span.set_attribute("model_id", model_id)
            try:
                request = self._validate(messages, model_id, temperature)
                span.set_attribute("message_count", len(request.messages))

                model = self._resolve(request.model)
                span.set_attribute("provider", model.vendor.value)

                vendor_request = to_vendor_format(
                    model.vendor,
                    request.messages,
                    system_policy=self._config.gemini_system_policy,
                )

                raw = await self._invoke(model, vendor_request, request.temperature)
                reply = self._normalize(model, raw)

            except GatewayError as e:
                logger.warning(f"Chat request for {model_id} failed ({e.kind}): {e.message}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, e.kind))
                raise

            logger.info(
                f"Chat completed: model={model.id} provider={model.vendor.value} "
                f"messages={len(request.messages)} reply_chars={len(reply.content)}"
            )
            return reply

    def _validate(
        self,
        messages: Sequence[Any],
        model_id: str,
        temperature: Optional[float],
    ) -> ChatRequest:
        """Check the request shape before anything else happens."""
        if not isinstance(messages, (list, tuple)):
            raise InvalidInputError("messages must be an array", model=model_id)

        if temperature is None:
            temperature = self._config.default_temperature

        try:
            return ChatRequest(
                model=model_id,
                messages=[
                    m.model_dump() if isinstance(m, ChatMessage) else m
                    for m in messages
                ],
                temperature=temperature,
            )
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidInputError(f"Invalid chat request: {problems}", model=model_id)

    def _resolve(self, model_id: str) -> ModelDescriptor:
        model = self._catalog.resolve(model_id)
        if not self._credentials.is_available(model.vendor):
            raise ProviderUnavailableError(
                f"Model {model_id} requires {model.provider} credentials, which are not configured",
                provider=model.vendor.value,
                model=model_id,
            )
        return model

    async def _invoke(self, model: ModelDescriptor, vendor_request, temperature: float):
        adapter = self._registry.get_adapter(model.vendor)
        try:
            return await asyncio.wait_for(
                adapter.complete(vendor_request, model.id, temperature),
                timeout=self._config.timeout,
            )
        except GatewayError:
            raise
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError(
                f"{model.vendor.value} did not respond within {self._config.timeout}s",
                provider=model.vendor.value,
                model=model.id,
            )
        except Exception as e:
            logger.exception(f"Unexpected {model.vendor.value} adapter failure")
            raise UpstreamError(
                f"{model.vendor.value} call failed: {e}",
                provider=model.vendor.value,
                model=model.id,
            )

    def _normalize(self, model: ModelDescriptor, raw: Any) -> ChatMessage:
        try:
            return from_vendor_format(model.vendor, raw)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(
                f"{model.vendor.value} returned an unexpected response: {e}",
                provider=model.vendor.value,
                model=model.id,
            )

    async def close(self) -> None:
        """Release adapter clients."""
        await self._registry.disconnect_all()
