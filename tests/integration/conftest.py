"""Shared fixtures for kubewatchdiff integration tests.

Provides resource factories plus scripted stand-ins for the resource
lister and the clock, so poll-driver pipelines can run end to end without
a Kubernetes cluster or real sleeps.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime, timedelta

import pytest

from kubewatchdiff.models.resources import ListedResource

_T0 = datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Resource factories
# ---------------------------------------------------------------------------


def make_deployment(
    name: str,
    namespace: str = "default",
    replicas: int = 2,
    image: str = "nginx:1.25",
    labels: dict[str, str] | None = None,
    resource_version: str = "1",
    ready_replicas: int | None = None,
) -> dict:
    """Return a Deployment body as the API server would list it."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": resource_version,
            "labels": labels or {"app": name},
            "annotations": {},
        },
        "spec": {
            "replicas": replicas,
            "selector": {"matchLabels": {"app": name}},
            "template": {
                "metadata": {"labels": {"app": name}},
                "spec": {"containers": [{"name": "app", "image": image}]},
            },
        },
        "status": {"readyReplicas": replicas if ready_replicas is None else ready_replicas},
    }


def make_node(name: str, unschedulable: bool = False) -> dict:
    """Return a cluster-scoped Node body."""
    return {
        "apiVersion": "v1",
        "kind": "Node",
        "metadata": {"name": name, "resourceVersion": "1"},
        "spec": {"unschedulable": unschedulable},
        "status": {"conditions": [{"type": "Ready", "status": "True"}]},
    }


# ---------------------------------------------------------------------------
# Collaborator stand-ins
# ---------------------------------------------------------------------------


class FakeLister:
    """Returns one scripted listing per call; the last one repeats.

    ``fail_on`` is the 1-indexed call number that raises ``error`` instead.
    """

    def __init__(
        self,
        listings: list[list[dict]],
        fail_on: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self._listings = listings
        self._fail_on = fail_on
        self._error = error or ConnectionError("connection refused")
        self.calls: list[tuple[str, str, str, str]] = []

    async def list(
        self,
        kind: str,
        namespace: str = "",
        label_selector: str = "",
        field_selector: str = "",
    ) -> list[ListedResource]:
        self.calls.append((kind, namespace, label_selector, field_selector))
        if self._fail_on is not None and len(self.calls) == self._fail_on:
            raise self._error
        index = min(len(self.calls), len(self._listings)) - 1
        return [ListedResource.from_document(copy.deepcopy(doc)) for doc in self._listings[index]]

    async def __aenter__(self) -> FakeLister:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


class FakeClock:
    """Deterministic clock: ``sleep`` records the duration and advances ``now``."""

    def __init__(self, start: datetime = _T0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
