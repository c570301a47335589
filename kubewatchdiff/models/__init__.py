"""Core data structures for kubewatchdiff."""

from kubewatchdiff.models.config import KubeWatchDiffConfig, WatchConfig
from kubewatchdiff.models.document import Document, DocumentKind, documents_equal, kind_of
from kubewatchdiff.models.resources import (
    DEFAULT_DIFF_SCOPE,
    ChangeEntry,
    ChangeKind,
    ChangeSet,
    FilterConfig,
    IterationResult,
    ListedResource,
    ResourceIdentity,
)

__all__ = [
    "DEFAULT_DIFF_SCOPE",
    "ChangeEntry",
    "ChangeKind",
    "ChangeSet",
    "Document",
    "DocumentKind",
    "FilterConfig",
    "IterationResult",
    "KubeWatchDiffConfig",
    "ListedResource",
    "ResourceIdentity",
    "WatchConfig",
    "documents_equal",
    "kind_of",
]
