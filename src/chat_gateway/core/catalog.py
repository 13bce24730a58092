"""
Model catalog: which models exist and which provider owns each one.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..models.catalog import ModelDescriptor, Provider
from .credentials import CredentialGate
from .errors import ConfigInvalidError, DuplicateModelError, ModelNotFoundError

logger = logging.getLogger(__name__)


# Default model configurations, used when no valid override is configured
DEFAULT_MODELS: Dict[Provider, List[Dict[str, str]]] = {
    Provider.OPENAI: [
        {"id": "gpt-4o", "name": "GPT-4o", "provider": "OpenAI"},
        {"id": "gpt-4o-mini", "name": "GPT-4o Mini", "provider": "OpenAI"},
        {"id": "gpt-4-turbo", "name": "GPT-4 Turbo", "provider": "OpenAI"},
        {"id": "gpt-3.5-turbo", "name": "GPT-3.5 Turbo", "provider": "OpenAI"},
    ],
    Provider.ANTHROPIC: [
        {"id": "claude-3-5-sonnet-20241022", "name": "Claude 3.5 Sonnet", "provider": "Anthropic"},
        {"id": "claude-3-5-haiku-20241022", "name": "Claude 3.5 Haiku", "provider": "Anthropic"},
        {"id": "claude-3-opus-20240229", "name": "Claude 3 Opus", "provider": "Anthropic"},
    ],
    Provider.GOOGLE: [
        {"id": "gemini-2.0-flash-exp", "name": "Gemini 2.0 Flash", "provider": "Google"},
        {"id": "gemini-1.5-pro", "name": "Gemini 1.5 Pro", "provider": "Google"},
        {"id": "gemini-1.5-flash", "name": "Gemini 1.5 Flash", "provider": "Google"},
    ],
    Provider.GROQ: [
        {"id": "llama-3.3-70b-versatile", "name": "Llama 3.3 70B", "provider": "Groq"},
        {"id": "llama-3.1-70b-versatile", "name": "Llama 3.1 70B", "provider": "Groq"},
        {"id": "llama-3.2-90b-vision-preview", "name": "Llama 3.2 90B Vision", "provider": "Groq"},
        {"id": "mixtral-8x7b-32768", "name": "Mixtral 8x7B", "provider": "Groq"},
    ],
}

REQUIRED_FIELDS = ("id", "name", "provider")


def parse_model_override(provider: Provider, override: Any) -> List[ModelDescriptor]:
    """
    Validate one provider's override list.

    Args:
        provider: Provider that owns every entry
        override: JSON text or an already-parsed list of {id, name, provider}

    Returns:
        Descriptors for every entry

    Raises:
        ConfigInvalidError: If the override cannot be used as a whole
    """
    if isinstance(override, (str, bytes)):
        try:
            override = json.loads(override)
        except ValueError as e:
            raise ConfigInvalidError(f"not valid JSON: {e}")

    if not isinstance(override, list) or not override:
        raise ConfigInvalidError("expected a non-empty list of models")

    models = []
    seen = set()
    for index, entry in enumerate(override):
        if not isinstance(entry, dict):
            raise ConfigInvalidError(f"entry {index} is not an object")
        missing = [f for f in REQUIRED_FIELDS if not _non_empty(entry.get(f))]
        if missing:
            raise ConfigInvalidError(f"entry {index} missing {', '.join(missing)}")
        if entry["id"] in seen:
            raise ConfigInvalidError(f"entry {index} repeats id {entry['id']!r}")
        seen.add(entry["id"])

        try:
            models.append(ModelDescriptor(
                id=entry["id"],
                name=entry["name"],
                provider=entry["provider"],
                vendor=provider,
            ))
        except ValidationError as e:
            raise ConfigInvalidError(f"entry {index} invalid: {e}")

    return models


def load_vendor_models(provider: Provider, override: Any = None) -> List[ModelDescriptor]:
    """
    Model list for one provider: the override when valid, else the defaults.

    A bad override is logged and discarded as a whole; it never raises.
    """
    provider = Provider(provider)
    if override is None or override == "":
        return _defaults(provider)

    try:
        return parse_model_override(provider, override)
    except ConfigInvalidError as e:
        logger.warning(f"Invalid model override for {provider.value}, using defaults: {e}")
        return _defaults(provider)


def _defaults(provider: Provider) -> List[ModelDescriptor]:
    return [ModelDescriptor(vendor=provider, **m) for m in DEFAULT_MODELS[provider]]


def _non_empty(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


class ModelCatalog:
    """
    Registry of every configured model.

    Lookups see all models so callers can tell an unknown model from one
    whose provider lacks a credential; listings only show routable models.
    """

    def __init__(
        self,
        credentials: CredentialGate,
        overrides: Optional[Mapping[Provider, Any]] = None,
    ):
        """
        Build the catalog.

        Args:
            credentials: Gate deciding which providers are routable
            overrides: Optional per-provider model list overrides

        Raises:
            DuplicateModelError: If two providers list the same model id
        """
        self._credentials = credentials
        overrides = overrides or {}

        self._by_provider: Dict[Provider, List[ModelDescriptor]] = {}
        self._by_id: Dict[str, ModelDescriptor] = {}

        for provider in Provider:
            models = load_vendor_models(provider, overrides.get(provider))
            self._by_provider[provider] = models
            for model in models:
                existing = self._by_id.get(model.id)
                if existing is not None:
                    raise DuplicateModelError(
                        model.id, [existing.vendor.value, provider.value]
                    )
                self._by_id[model.id] = model

        logger.info(
            "Loaded model catalog: "
            + ", ".join(f"{p.value}={len(m)}" for p, m in self._by_provider.items())
        )

    def list_models(self) -> List[ModelDescriptor]:
        """Models whose provider currently has a credential."""
        available = []
        for provider in self._credentials.available_providers():
            available.extend(self._by_provider[provider])
        return available

    def all_models(self) -> List[ModelDescriptor]:
        """Every configured model regardless of credentials."""
        return [m for models in self._by_provider.values() for m in models]

    def models_for(self, provider: Provider) -> List[ModelDescriptor]:
        """Configured models of one provider."""
        return list(self._by_provider[Provider(provider)])

    def resolve(self, model_id: str) -> ModelDescriptor:
        """
        Look up a model by id.

        Raises:
            ModelNotFoundError: If no provider lists the model
        """
        model = self._by_id.get(model_id)
        if model is None:
            raise ModelNotFoundError(f"Unknown model: {model_id}", model=model_id)
        return model

    def is_routable(self, model_id: str) -> bool:
        """True when the model exists and its provider has a credential."""
        model = self._by_id.get(model_id)
        return model is not None and self._credentials.is_available(model.vendor)
