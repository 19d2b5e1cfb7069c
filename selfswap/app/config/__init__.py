"""Updater configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from math import isfinite
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "selfswap.json"
_APP_CONFIG_CACHE: AppConfig | None = None

_DEFAULT_MAX_ATTEMPTS = 10
_DEFAULT_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class EvictionConfig:
    """Retry budget for moving a locked artifact aside."""

    max_attempts: int
    delay_seconds: float


@dataclass(frozen=True)
class PayloadConfig:
    """Settings for the temporary updater payload."""

    prefix: str | None


@dataclass(frozen=True)
class AppConfig:
    """Structured configuration values for the updater."""

    eviction: EvictionConfig
    payload: PayloadConfig


def get_app_config() -> AppConfig:
    """Return the cached updater configuration."""

    global _APP_CONFIG_CACHE
    if _APP_CONFIG_CACHE is None:
        _APP_CONFIG_CACHE = load_app_config()
    return _APP_CONFIG_CACHE


def reset_app_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _APP_CONFIG_CACHE
    _APP_CONFIG_CACHE = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    eviction = _parse_eviction_section(data.get("eviction"))
    payload = _parse_payload_section(data.get("payload"))
    return AppConfig(eviction=eviction, payload=payload)


def get_eviction_config() -> EvictionConfig:
    return get_app_config().eviction


def get_payload_config() -> PayloadConfig:
    return get_app_config().payload


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_eviction_section(section: Any) -> EvictionConfig:
    if not isinstance(section, Mapping):
        return EvictionConfig(
            max_attempts=_DEFAULT_MAX_ATTEMPTS, delay_seconds=_DEFAULT_DELAY_SECONDS
        )
    attempts = _coerce_positive_int(section.get("max_attempts"), default=_DEFAULT_MAX_ATTEMPTS)
    delay = _coerce_delay(section.get("delay_seconds"), default=_DEFAULT_DELAY_SECONDS)
    return EvictionConfig(max_attempts=attempts, delay_seconds=delay)


def _parse_payload_section(section: Any) -> PayloadConfig:
    if not isinstance(section, Mapping):
        return PayloadConfig(prefix=None)
    prefix = section.get("prefix")
    if isinstance(prefix, str) and prefix.strip():
        return PayloadConfig(prefix=prefix.strip())
    return PayloadConfig(prefix=None)


def _coerce_positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(float(value))
        except ValueError:
            return default
    else:
        return default
    if candidate <= 0:
        return default
    return candidate


def _coerce_delay(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = float(value)
    elif isinstance(value, str):
        try:
            candidate = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not isfinite(candidate) or candidate < 0:
        return default
    return candidate


__all__ = [
    "AppConfig",
    "EvictionConfig",
    "PayloadConfig",
    "get_app_config",
    "get_eviction_config",
    "get_payload_config",
    "load_app_config",
    "reset_app_config_cache",
]
