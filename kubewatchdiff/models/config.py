"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_INTERVAL_SECONDS = 10
DEFAULT_ITERATIONS = 6
MIN_INTERVAL_SECONDS = 1
MAX_INTERVAL_SECONDS = 600
MIN_ITERATIONS = 1
MAX_ITERATIONS = 100


@dataclass
class WatchConfig:
    """Defaults for one watch session.

    Interval and iteration bounds are enforced by the poll driver, not here.
    """

    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    iterations: int = DEFAULT_ITERATIONS
    ignore_status: bool = False
    ignore_meta: bool = False
    show_timestamp: bool = False


@dataclass
class KubeConfig:
    """Kubernetes client configuration."""

    context: str = ""


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeWatchDiffConfig:
    """Top-level configuration."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    kube: KubeConfig = field(default_factory=KubeConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
