"""Interface between the poll driver and whatever enumerates resources."""

from __future__ import annotations

from typing import Protocol

from kubewatchdiff.models.resources import ListedResource


class ResourceLister(Protocol):
    """Lists the current state of every resource matching the filters.

    Implementations raise on transport, auth or not-found failures; the
    poll driver does not retry.  Results may come back in any order.
    """

    async def list(
        self,
        kind: str,
        namespace: str = "",
        label_selector: str = "",
        field_selector: str = "",
    ) -> list[ListedResource]: ...
