"""Exception hierarchy for kubewatchdiff."""

from __future__ import annotations


class WatchDiffError(Exception):
    """Base class for all kubewatchdiff errors."""


class ListingError(WatchDiffError):
    """Raised when the resource lister fails; aborts the whole watch run."""

    def __init__(self, kind: str, cause: BaseException) -> None:
        super().__init__(f"failed to list {kind} resources: {cause}")
        self.kind = kind
        self.cause = cause


class DocumentParseError(WatchDiffError):
    """Raised when diff input cannot be parsed into a resource document."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"failed to parse {source}: {reason}")
        self.source = source
        self.reason = reason


class ConfigError(WatchDiffError):
    """Raised for invalid configuration values."""


class ClusterConfigError(WatchDiffError):
    """Raised when neither in-cluster config nor a kubeconfig can be loaded."""

    def __init__(self, context: str, cause: BaseException) -> None:
        where = f"context {context!r}" if context else "the current context"
        super().__init__(f"cannot load Kubernetes config for {where}: {cause}")
        self.context = context
        self.cause = cause
