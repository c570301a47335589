"""Symmetric document filters applied before diffing.

Both sides of a diff must go through the same :func:`apply_filters` call,
otherwise the filtered fields show up as spurious changes.
"""

from __future__ import annotations

from kubewatchdiff.models.document import Document
from kubewatchdiff.models.resources import FilterConfig

_KEPT_METADATA_FIELDS = ("name", "namespace")


def apply_filters(document: dict[str, Document], config: FilterConfig) -> dict[str, Document]:
    """Return a filtered shallow copy of *document*; the input is not modified.

    ``ignore_status`` drops the top-level ``status`` key (absence is fine).
    ``ignore_meta`` replaces ``metadata`` with a map holding only ``name``
    and ``namespace``, dropping labels, annotations, resourceVersion,
    managedFields and everything else.
    """
    filtered = dict(document)
    if config.ignore_status:
        filtered.pop("status", None)
    if config.ignore_meta:
        metadata = filtered.get("metadata")
        if isinstance(metadata, dict):
            filtered["metadata"] = trim_metadata(metadata)
    return filtered


def trim_metadata(metadata: dict[str, Document]) -> dict[str, Document]:
    """Keep only the identifying metadata fields that are present."""
    return {key: metadata[key] for key in _KEPT_METADATA_FIELDS if key in metadata}
