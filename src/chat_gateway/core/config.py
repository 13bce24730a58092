"""
Configuration loading for the chat gateway.

Credentials and model overrides are captured once into a read-only
GatewayConfig that is passed into the gateway at startup.
"""

import os
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ..models.catalog import Provider
from .translator import GeminiSystemPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TIMEOUT = 60.0
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7

API_KEY_ENV = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.GOOGLE: "GOOGLE_API_KEY",
    Provider.GROQ: "GROQ_API_KEY",
}

MODELS_ENV = {
    Provider.OPENAI: "OPENAI_MODELS",
    Provider.ANTHROPIC: "ANTHROPIC_MODELS",
    Provider.GOOGLE: "GOOGLE_MODELS",
    Provider.GROQ: "GROQ_MODELS",
}


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class GatewayConfig:
    """Complete, read-only gateway configuration."""
    credentials: Mapping[Provider, Optional[str]] = field(default_factory=dict)
    model_overrides: Mapping[Provider, Any] = field(default_factory=dict)
    base_urls: Mapping[Provider, str] = field(default_factory=dict)
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT
    default_model: str = DEFAULT_MODEL
    default_temperature: float = DEFAULT_TEMPERATURE
    gemini_system_policy: GeminiSystemPolicy = GeminiSystemPolicy.DROP

    def __post_init__(self):
        object.__setattr__(self, "credentials", _freeze(
            {Provider(k): v for k, v in dict(self.credentials).items()}
        ))
        object.__setattr__(self, "model_overrides", _freeze(
            {Provider(k): v for k, v in dict(self.model_overrides).items()}
        ))
        object.__setattr__(self, "base_urls", _freeze(
            {Provider(k): v for k, v in dict(self.base_urls).items()}
        ))
        object.__setattr__(
            self, "gemini_system_policy", GeminiSystemPolicy(self.gemini_system_policy)
        )


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GatewayConfig:
    """
    Load gateway configuration from the environment and an optional YAML file.

    Args:
        config_path: Path to a YAML config file. If None, CHAT_GATEWAY_CONFIG
            and then config/chat-gateway.yaml are tried.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Loaded configuration. Malformed input never aborts loading.
    """
    env = os.environ if environ is None else environ

    credentials: Dict[Provider, Optional[str]] = {}
    overrides: Dict[Provider, Any] = {}
    for provider in Provider:
        credentials[provider] = env.get(API_KEY_ENV[provider])
        if env.get(MODELS_ENV[provider]):
            overrides[provider] = env[MODELS_ENV[provider]]

    settings: Dict[str, Any] = {
        "max_tokens": _parse_number(
            env.get("CHAT_GATEWAY_MAX_TOKENS"), int, DEFAULT_MAX_TOKENS, "CHAT_GATEWAY_MAX_TOKENS"
        ),
        "timeout": _parse_number(
            env.get("CHAT_GATEWAY_TIMEOUT"), float, DEFAULT_TIMEOUT, "CHAT_GATEWAY_TIMEOUT"
        ),
        "default_model": env.get("CHAT_GATEWAY_DEFAULT_MODEL") or DEFAULT_MODEL,
        "gemini_system_policy": _parse_policy(env.get("GEMINI_SYSTEM_POLICY")),
    }
    base_urls: Dict[Provider, str] = {}

    data = _load_yaml(config_path or env.get("CHAT_GATEWAY_CONFIG"))
    if data:
        _apply_yaml(data, env, credentials, overrides, base_urls, settings)

    config = GatewayConfig(
        credentials=credentials,
        model_overrides=overrides,
        base_urls=base_urls,
        **settings,
    )
    configured = [p.value for p, key in config.credentials.items() if key]
    logger.info(f"Loaded gateway config; credentials present for: {configured or 'none'}")
    return config


def _load_yaml(config_path: Optional[str]) -> Dict[str, Any]:
    """Read the YAML file, returning an empty dict when absent or broken."""
    if config_path is None:
        default = Path("config/chat-gateway.yaml")
        if not default.exists():
            return {}
        config_path = str(default)

    if not Path(config_path).exists():
        logger.warning(f"Gateway config file not found: {config_path}")
        return {}

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Ignoring config {config_path}: top level must be a mapping")
        return {}
    return data


def _apply_yaml(
    data: Dict[str, Any],
    env: Mapping[str, str],
    credentials: Dict[Provider, Optional[str]],
    overrides: Dict[Provider, Any],
    base_urls: Dict[Provider, str],
    settings: Dict[str, Any],
) -> None:
    """Layer YAML values over the environment-derived ones."""
    providers = data.get("providers") or {}
    if not isinstance(providers, dict):
        logger.error("Ignoring 'providers' section: must be a mapping")
        providers = {}

    for name, section in providers.items():
        try:
            provider = Provider(name)
        except ValueError:
            logger.warning(f"Ignoring unknown provider in config: {name}")
            continue
        if not isinstance(section, dict):
            logger.warning(f"Ignoring config for {name}: must be a mapping")
            continue

        if "api_key" in section:
            credentials[provider] = _expand_env(section["api_key"], env)
        if section.get("base_url"):
            base_urls[provider] = str(section["base_url"])
        if "models" in section:
            overrides[provider] = section["models"]

    if "max_tokens" in data:
        settings["max_tokens"] = _parse_number(
            data["max_tokens"], int, settings["max_tokens"], "max_tokens"
        )
    if "timeout" in data:
        settings["timeout"] = _parse_number(
            data["timeout"], float, settings["timeout"], "timeout"
        )
    if data.get("default_model"):
        settings["default_model"] = str(data["default_model"])
    if "default_temperature" in data:
        settings["default_temperature"] = _parse_number(
            data["default_temperature"], float, DEFAULT_TEMPERATURE, "default_temperature",
            low=0, high=2,
        )
    if "gemini_system_policy" in data:
        settings["gemini_system_policy"] = _parse_policy(data["gemini_system_policy"])


def _expand_env(value: Any, env: Mapping[str, str]) -> Optional[str]:
    """Expand a ${VAR} reference the same way for every secret."""
    if value is None:
        return None
    value = str(value)
    if value.startswith("${") and value.endswith("}"):
        return env.get(value[2:-1], "")
    return value


def _parse_number(raw: Any, cast, default, name: str, low: float = 0, high: float = None):
    """Parse a numeric setting; values must be > low (or within [low, high] when bounded)."""
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default
    if high is None:
        in_range = value > low
    else:
        in_range = low <= value <= high
    if not in_range:
        logger.warning(f"{name} out of range: {raw!r}, using {default}")
        return default
    return value


def _parse_policy(raw: Any) -> GeminiSystemPolicy:
    if not raw:
        return GeminiSystemPolicy.DROP
    try:
        return GeminiSystemPolicy(str(raw).lower())
    except ValueError:
        logger.warning(f"Unknown Gemini system policy {raw!r}, using 'drop'")
        return GeminiSystemPolicy.DROP
