"""Poll driver for watch sessions.

Runs a fixed number of iterations, each one strictly sequential::

    list -> sort -> (filter -> diff -> render -> commit) per resource -> sleep

States move ``IDLE -> LISTING -> DIFFING -> SLEEPING -> LISTING ... -> DONE``.
The lister call and the inter-iteration sleep are the only await points;
cancelling the task (or an enclosing ``asyncio.timeout``) aborts either one
and leaves the driver in ``DONE``.  A listing failure aborts the whole run
with :class:`~kubewatchdiff.errors.ListingError`; results of completed
iterations are discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

import structlog

from kubewatchdiff.clock import Clock, SystemClock
from kubewatchdiff.diff.differ import compute_diff, compute_removal
from kubewatchdiff.diff.filters import apply_filters
from kubewatchdiff.diff.renderer import DiffRenderer
from kubewatchdiff.errors import ListingError
from kubewatchdiff.lister.base import ResourceLister
from kubewatchdiff.models.config import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_ITERATIONS,
    MAX_INTERVAL_SECONDS,
    MAX_ITERATIONS,
    MIN_INTERVAL_SECONDS,
    MIN_ITERATIONS,
    WatchConfig,
)
from kubewatchdiff.models.resources import (
    DEFAULT_DIFF_SCOPE,
    FilterConfig,
    IterationResult,
    ListedResource,
)
from kubewatchdiff.observability.metrics import diffs_rendered_total, iterations_total, list_failures_total
from kubewatchdiff.snapshot.store import SnapshotStore

_log = structlog.get_logger(component="watch.driver")

NO_CHANGES_MESSAGE = "No changes detected across iterations"


class DriverState(StrEnum):
    """Lifecycle of one watch run."""

    IDLE = "idle"
    LISTING = "listing"
    DIFFING = "diffing"
    SLEEPING = "sleeping"
    DONE = "done"


@dataclass(frozen=True)
class WatchOptions:
    """Caller-supplied settings for one watch session."""

    ignore_status: bool = False
    ignore_meta: bool = False
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    iterations: int = DEFAULT_ITERATIONS
    show_timestamp: bool = False

    @classmethod
    def from_config(cls, config: WatchConfig) -> WatchOptions:
        return cls(
            ignore_status=config.ignore_status,
            ignore_meta=config.ignore_meta,
            interval_seconds=config.interval_seconds,
            iterations=config.iterations,
            show_timestamp=config.show_timestamp,
        )

    @property
    def filters(self) -> FilterConfig:
        return FilterConfig(ignore_status=self.ignore_status, ignore_meta=self.ignore_meta)

    def clamped(self) -> WatchOptions:
        """Return a copy with interval and iterations pulled into range."""
        return replace(
            self,
            interval_seconds=clamp(self.interval_seconds, MIN_INTERVAL_SECONDS, MAX_INTERVAL_SECONDS),
            iterations=clamp(self.iterations, MIN_ITERATIONS, MAX_ITERATIONS),
        )


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class PollDriver:
    """Drive a bounded number of list-and-diff iterations.

    Args:
        lister:          Source of the current resource state.
        options:         Filters, interval, iteration budget, timestamps.
                         Interval and iterations are clamped silently.
        store:           Snapshot store for this session.  Pass a pre-seeded
                         store to establish a baseline; otherwise every
                         resource shows as new on the first iteration.
        clock:           Time source and cancellable sleeper.
        scope:           Top-level keys compared by the differ.
        track_deletions: Evict and report resources that stop being listed.
    """

    def __init__(
        self,
        lister: ResourceLister,
        options: WatchOptions | None = None,
        store: SnapshotStore | None = None,
        clock: Clock | None = None,
        scope: Sequence[str] = DEFAULT_DIFF_SCOPE,
        track_deletions: bool = False,
    ) -> None:
        requested = options or WatchOptions()
        self._options = requested.clamped()
        if self._options != requested:
            _log.debug(
                "watch_options_clamped",
                interval_seconds=self._options.interval_seconds,
                iterations=self._options.iterations,
            )
        self._lister = lister
        self._store = store if store is not None else SnapshotStore()
        self._clock: Clock = clock or SystemClock()
        self._renderer = DiffRenderer(show_timestamp=self._options.show_timestamp, clock=self._clock)
        self._scope = tuple(scope)
        self._track_deletions = track_deletions
        self.state = DriverState.IDLE

    @property
    def options(self) -> WatchOptions:
        return self._options

    @property
    def store(self) -> SnapshotStore:
        return self._store

    async def run(
        self,
        kind: str,
        namespace: str = "",
        label_selector: str = "",
        field_selector: str = "",
    ) -> str:
        """Run every iteration and return the aggregated report.

        Returns the non-empty iteration blocks joined by a blank line, or
        :data:`NO_CHANGES_MESSAGE` when no iteration produced a diff.

        Raises:
            ListingError: the lister failed; the run is aborted.
            asyncio.CancelledError: the caller cancelled the run.
        """
        total = self._options.iterations
        _log.info(
            "watch_started",
            kind=kind,
            namespace=namespace,
            iterations=total,
            interval_seconds=self._options.interval_seconds,
        )

        blocks: list[str] = []
        try:
            for number in range(1, total + 1):
                result = await self.run_iteration(number, kind, namespace, label_selector, field_selector)
                if result.reports:
                    blocks.append(result.render())

                if number < total:
                    self.state = DriverState.SLEEPING
                    await self._clock.sleep(self._options.interval_seconds)
        except asyncio.CancelledError:
            _log.info("watch_cancelled", kind=kind, state=self.state.value)
            raise
        finally:
            self.state = DriverState.DONE

        _log.info("watch_finished", kind=kind, changed_iterations=len(blocks))
        if not blocks:
            return NO_CHANGES_MESSAGE
        return "\n".join(blocks)

    async def run_iteration(
        self,
        number: int,
        kind: str,
        namespace: str = "",
        label_selector: str = "",
        field_selector: str = "",
    ) -> IterationResult:
        """List, diff and render once; commit every listed resource."""
        self.state = DriverState.LISTING
        resources = await self._list(kind, namespace, label_selector, field_selector)

        self.state = DriverState.DIFFING
        result = IterationResult(number=number)
        seen: set[str] = set()
        for resource in sorted(resources, key=lambda r: r.identity.sort_key):
            seen.add(resource.identity.key)
            report = self.diff_resource(resource)
            if report:
                result.reports.append(report)
                diffs_rendered_total.labels(kind=resource.identity.kind).inc()

        if self._track_deletions:
            result.reports.extend(self._report_deletions(seen))

        iterations_total.labels(changed="true" if result.reports else "false").inc()
        _log.debug("watch_iteration_complete", iteration=number, resources=len(resources), reports=len(result.reports))
        return result

    def diff_resource(self, resource: ListedResource) -> str:
        """Diff *resource* against its snapshot, then commit it unfiltered."""
        filters = self._options.filters
        previous = self._store.lookup(resource.identity)
        changes = compute_diff(
            apply_filters(previous, filters),
            apply_filters(resource.document, filters),
            scope=self._scope,
        )
        report = self._renderer.render(resource.identity, changes)
        self._store.commit(resource.identity, resource.document)
        return report

    async def _list(
        self,
        kind: str,
        namespace: str,
        label_selector: str,
        field_selector: str,
    ) -> list[ListedResource]:
        try:
            return await self._lister.list(kind, namespace, label_selector, field_selector)
        except Exception as exc:
            list_failures_total.labels(kind=kind).inc()
            _log.error("watch_list_failed", kind=kind, namespace=namespace, error=str(exc))
            raise ListingError(kind, exc) from exc

    def _report_deletions(self, seen: set[str]) -> list[str]:
        reports: list[str] = []
        gone = sorted(
            (identity for identity in self._store.identities() if identity.key not in seen),
            key=lambda identity: identity.sort_key,
        )
        for identity in gone:
            previous = apply_filters(self._store.lookup(identity), self._options.filters)
            self._store.evict(identity)
            report = self._renderer.render(identity, compute_removal(previous, scope=self._scope))
            if report:
                reports.append(report)
        return reports
