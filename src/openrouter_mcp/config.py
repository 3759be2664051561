"""
Process configuration, resolved once at startup.

Values come from the environment (a ``.env`` file is loaded first). The
resulting `BridgeConfig` is frozen and shared by every invocation.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Mapping, Optional

from dotenv import load_dotenv

__all__ = [
    "ConfigError",
    "GatekeeperMode",
    "BridgeConfig",
    "load_config",
    "parse_allowed_models",
    "DEFAULT_BASE_URL",
    "DEFAULT_DISPATCH_TIMEOUT",
    "DEFAULT_MAX_FILES",
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_MODEL_EXAMPLES",
]

DEFAULT_BASE_URL: Final = "https://openrouter.ai/api/v1"
DEFAULT_DISPATCH_TIMEOUT: Final = 120.0
DEFAULT_MAX_FILES: Final = 10
DEFAULT_MAX_FILE_SIZE: Final = 150 * 1024
DEFAULT_MODEL_EXAMPLES: Final = (
    "'openai/gpt-5.2' 'google/gemini-3-pro-preview' 'openai/gpt-5.2-codex'"
)

_API_KEY: Final = "OPENROUTER_API_KEY"
_ALLOWED_MODELS: Final = "OPENROUTER_ALLOWED_MODELS"
_REQUIRE_ALLOWED_MODELS: Final = "OPENROUTER_REQUIRE_ALLOWED_MODELS"
_DEFAULT_SYSTEM_PROMPT: Final = "OPENROUTER_DEFAULT_SYSTEM_PROMPT"
_MODEL_EXAMPLES: Final = "OPENROUTER_MODEL_EXAMPLES"
_BASE_URL: Final = "OPENROUTER_BASE_URL"
_DISPATCH_TIMEOUT: Final = "OPENROUTER_DISPATCH_TIMEOUT"
_MAX_FILES: Final = "OPENROUTER_MAX_FILES"
_MAX_FILE_SIZE: Final = "OPENROUTER_MAX_FILE_SIZE"
_LOG_LEVEL: Final = "OPENROUTER_LOG_LEVEL"

_TRUE_VALUES: Final = frozenset({"1", "true", "yes", "on"})

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Startup configuration is missing or malformed."""


class GatekeeperMode(StrEnum):
    PERMISSIVE = "permissive"
    RESTRICTIVE = "restrictive"


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    api_key: str
    allowed_models: tuple[str, ...] = ()
    default_system_prompt: Optional[str] = None
    model_examples: str = DEFAULT_MODEL_EXAMPLES
    base_url: str = DEFAULT_BASE_URL
    dispatch_timeout: Optional[float] = DEFAULT_DISPATCH_TIMEOUT
    max_files: int = DEFAULT_MAX_FILES
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    log_level: str = "INFO"

    @property
    def gatekeeper_mode(self) -> GatekeeperMode:
        if self.allowed_models:
            return GatekeeperMode.RESTRICTIVE
        return GatekeeperMode.PERMISSIVE

    def __repr__(self) -> str:
        # keep the credential out of logs and tracebacks
        return (
            f"{self.__class__.__name__}(mode={self.gatekeeper_mode.value}, "
            f"allowed_models={self.allowed_models!r}, base_url={self.base_url!r}, "
            f"dispatch_timeout={self.dispatch_timeout!r}, max_files={self.max_files}, "
            f"max_file_size={self.max_file_size})"
        )


def parse_allowed_models(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated allow-list, keeping first-seen order."""
    if not raw:
        return ()
    seen: dict[str, None] = {}
    for item in raw.split(","):
        name = item.strip()
        if name:
            seen.setdefault(name, None)
    return tuple(seen)


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    use_dotenv: bool = True,
) -> BridgeConfig:
    """Build the process configuration.

    Args:
        env: Mapping to read from. Defaults to ``os.environ``.
        use_dotenv: Load a ``.env`` file into ``os.environ`` first. Ignored
            when an explicit ``env`` is passed.

    Raises:
        ConfigError: if the credential is missing, a mandated allow-list is
            absent, or a numeric value cannot be parsed.
    """
    if env is None:
        if use_dotenv:
            load_dotenv()
        env = os.environ

    api_key = (env.get(_API_KEY) or "").strip()
    if not api_key:
        raise ConfigError(f"{_API_KEY} environment variable is required")

    allowed = parse_allowed_models(env.get(_ALLOWED_MODELS))
    if _ALLOWED_MODELS in env and not allowed:
        logger.warning("%s is set but lists no models; running in permissive mode", _ALLOWED_MODELS)
    if (env.get(_REQUIRE_ALLOWED_MODELS) or "").strip().lower() in _TRUE_VALUES and not allowed:
        raise ConfigError(f"{_ALLOWED_MODELS} environment variable is required")

    config = BridgeConfig(
        api_key=api_key,
        allowed_models=allowed,
        default_system_prompt=env.get(_DEFAULT_SYSTEM_PROMPT) or None,
        model_examples=env.get(_MODEL_EXAMPLES) or DEFAULT_MODEL_EXAMPLES,
        base_url=env.get(_BASE_URL) or DEFAULT_BASE_URL,
        dispatch_timeout=_parse_timeout(env.get(_DISPATCH_TIMEOUT)),
        max_files=_parse_positive_int(env, _MAX_FILES, DEFAULT_MAX_FILES),
        max_file_size=_parse_positive_int(env, _MAX_FILE_SIZE, DEFAULT_MAX_FILE_SIZE),
        log_level=(env.get(_LOG_LEVEL) or "INFO").upper(),
    )
    logger.debug("Loaded configuration: %r", config)
    return config


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return DEFAULT_DISPATCH_TIMEOUT
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{_DISPATCH_TIMEOUT} must be a number, got {raw!r}") from exc
    # zero or negative disables the deadline
    return value if value > 0 else None


def _parse_positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be greater than 0")
    return value
