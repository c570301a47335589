"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubewatchdiff.errors import ConfigError
from kubewatchdiff.models.config import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_ITERATIONS,
    APIConfig,
    KubeConfig,
    KubeWatchDiffConfig,
    LogConfig,
    WatchConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEWATCHDIFF_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ConfigError(f"KUBEWATCHDIFF_{key} must be an integer, got {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigError(f"Invalid log level: {value}. Must be one of {sorted(valid)}")
    return value.lower()


def load_config() -> KubeWatchDiffConfig:
    """Load configuration from KUBEWATCHDIFF_* environment variables."""
    return KubeWatchDiffConfig(
        watch=WatchConfig(
            # Out-of-range values are clamped by the poll driver.
            interval_seconds=_env_int("WATCH_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS),
            iterations=_env_int("WATCH_ITERATIONS", DEFAULT_ITERATIONS),
            ignore_status=_env_bool("IGNORE_STATUS", False),
            ignore_meta=_env_bool("IGNORE_META", False),
            show_timestamp=_env_bool("SHOW_TIMESTAMP", False),
        ),
        kube=KubeConfig(
            context=_env("KUBE_CONTEXT", ""),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
