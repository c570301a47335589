"""Per-identity snapshot cache for one watch session.

The store owns every snapshot exclusively.  ``lookup`` hands out deep
copies and ``commit`` stores one, so no caller can mutate a stored value
after the fact.  A new store must be created per watch session; the store
is not safe for concurrent ``commit`` calls on the same identity.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from kubewatchdiff.models.document import Document, clone
from kubewatchdiff.models.resources import ResourceIdentity

_log = structlog.get_logger(component="snapshot.store")


class SnapshotStore:
    """In-memory mapping of identity key -> last observed document."""

    def __init__(self) -> None:
        # identity.key -> (identity, snapshot)
        self._snapshots: dict[str, tuple[ResourceIdentity, Document]] = {}

    def lookup(self, identity: ResourceIdentity) -> Document:
        """Return a copy of the snapshot for *identity*.

        Falls back to the identity skeleton when nothing was committed yet.
        Never raises.
        """
        entry = self._snapshots.get(identity.key)
        if entry is None:
            return identity.skeleton()
        return clone(entry[1])

    def commit(self, identity: ResourceIdentity, document: Document) -> None:
        """Store a copy of *document* as the snapshot for *identity*.

        The copy is built before the slot is replaced, so a failure while
        copying leaves the previous snapshot untouched.
        """
        snapshot = clone(document)
        replaced = identity.key in self._snapshots
        self._snapshots[identity.key] = (identity, snapshot)
        _log.debug("snapshot_committed", key=identity.key, replaced=replaced)

    def evict(self, identity: ResourceIdentity) -> bool:
        """Drop the snapshot for *identity*.  Returns True if one existed."""
        removed = self._snapshots.pop(identity.key, None) is not None
        if removed:
            _log.debug("snapshot_evicted", key=identity.key)
        return removed

    def identities(self) -> list[ResourceIdentity]:
        """Return the identities currently held, in insertion order."""
        return [identity for identity, _ in self._snapshots.values()]

    def clear(self) -> None:
        self._snapshots.clear()

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, ResourceIdentity) and identity.key in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[ResourceIdentity]:
        return iter(self.identities())
