"""Snapshot layer for kubewatchdiff.

Holds the last-observed document of every resource seen during one watch
session.  Callers only ever receive deep copies, so the differ works on
frozen inputs while the store is updated for the next iteration.

Submodules:
    store -- Per-identity snapshot cache with lookup/commit/evict.
"""

from kubewatchdiff.snapshot.store import SnapshotStore

__all__ = ["SnapshotStore"]
