"""Recursive structural diff for resource documents.

Produces a :class:`~kubewatchdiff.models.resources.ChangeSet` from two
documents.  Only the top-level keys in ``scope`` (``spec`` and ``status``
by default) are compared; ``apiVersion``, ``kind`` and ``metadata`` are
ignored unless a caller widens the scope.

Maps are walked in sorted key order, so output never depends on dict
insertion order.  Lists are compared positionally, index by index: an
element inserted anywhere but the tail shows up as a change at every
following index.  This is intentional and callers should not expect a
minimal edit script.

When the old document carries none of the scoped keys (the skeleton the
snapshot store returns for an unseen resource) the scoped subtrees of the
new document are reported as one wholesale addition each instead of field
by field.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, TypeAlias

from kubewatchdiff.models.document import Document, documents_equal
from kubewatchdiff.models.resources import (
    DEFAULT_DIFF_SCOPE,
    ChangeEntry,
    ChangeKind,
    ChangeSet,
    PathToken,
)


class _Missing:
    """Marker for a key or index that exists on one side only."""

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Final = _Missing()

_Side: TypeAlias = "Document | _Missing"


def compute_diff(
    old_doc: dict[str, Document],
    new_doc: dict[str, Document],
    scope: Sequence[str] = DEFAULT_DIFF_SCOPE,
) -> ChangeSet:
    """Compute the structural diff between two observations of a resource.

    Args:
        old_doc: The earlier document (or the identity skeleton).
        new_doc: The later document.
        scope:   Top-level keys to compare.

    Returns:
        A ChangeSet whose entries are ordered depth-first with keys and
        indices ascending.  An empty ChangeSet means no visible change.
    """
    if documents_equal(old_doc, new_doc):
        return ChangeSet()

    keys = sorted(set(scope))

    if is_skeleton(old_doc, keys):
        added = tuple(
            ChangeEntry(path=(key,), kind=ChangeKind.ADDED, payload=new_doc[key]) for key in keys if key in new_doc
        )
        return ChangeSet(entries=added, new_resource=True)

    changes: list[ChangeEntry] = []
    for key in keys:
        _diff_values(old_doc.get(key, _MISSING), new_doc.get(key, _MISSING), (key,), changes)
    return ChangeSet(entries=tuple(changes))


def compute_removal(old_doc: dict[str, Document], scope: Sequence[str] = DEFAULT_DIFF_SCOPE) -> ChangeSet:
    """Report the scoped subtrees of a resource that is no longer listed."""
    removed = tuple(
        ChangeEntry(path=(key,), kind=ChangeKind.REMOVED, payload=old_doc[key])
        for key in sorted(set(scope))
        if key in old_doc
    )
    return ChangeSet(entries=removed, deleted_resource=True)


def is_skeleton(document: dict[str, Document], scope: Sequence[str] = DEFAULT_DIFF_SCOPE) -> bool:
    """Return True when *document* holds none of the scoped keys."""
    return not any(key in document for key in scope)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _diff_values(old_val: _Side, new_val: _Side, path: tuple[PathToken, ...], changes: list[ChangeEntry]) -> None:
    """Recursively compare *old_val* and *new_val*, appending to *changes*."""
    match old_val, new_val:
        case _Missing(), _Missing():
            return
        case _Missing(), _:
            changes.append(ChangeEntry(path=path, kind=ChangeKind.ADDED, payload=new_val))
        case _, _Missing():
            changes.append(ChangeEntry(path=path, kind=ChangeKind.REMOVED, payload=old_val))
        case dict(), dict():
            _diff_dicts(old_val, new_val, path, changes)
        case list(), list():
            _diff_lists(old_val, new_val, path, changes)
        case _:
            # Scalars, or a structural type change such as a map replaced by a string.
            if not documents_equal(old_val, new_val):
                changes.append(ChangeEntry(path=path, kind=ChangeKind.REMOVED, payload=old_val))
                changes.append(ChangeEntry(path=path, kind=ChangeKind.ADDED, payload=new_val))


def _diff_dicts(
    old_dict: dict[str, Document],
    new_dict: dict[str, Document],
    path: tuple[PathToken, ...],
    changes: list[ChangeEntry],
) -> None:
    """Diff two maps over the sorted union of their keys."""
    for key in sorted(old_dict.keys() | new_dict.keys(), key=str):
        _diff_values(old_dict.get(key, _MISSING), new_dict.get(key, _MISSING), (*path, key), changes)


def _diff_lists(
    old_list: list[Document],
    new_list: list[Document],
    path: tuple[PathToken, ...],
    changes: list[ChangeEntry],
) -> None:
    """Diff two lists by index.

    Indices beyond the shorter list are reported as wholesale additions
    or removals.
    """
    for i in range(max(len(old_list), len(new_list))):
        old_item: _Side = old_list[i] if i < len(old_list) else _MISSING
        new_item: _Side = new_list[i] if i < len(new_list) else _MISSING
        _diff_values(old_item, new_item, (*path, i), changes)
