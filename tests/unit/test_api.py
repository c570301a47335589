"""Tests for the kubewatchdiff REST API.

Uses FastAPI's TestClient with a scripted lister; no cluster is needed.
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

from kubewatchdiff.api.app import create_app
from kubewatchdiff.diff.compare import NO_DIFFERENCES_MESSAGE
from kubewatchdiff.models.resources import ListedResource
from kubewatchdiff.watch.driver import NO_CHANGES_MESSAGE


def _configmap(value: str) -> dict:
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "cfg", "namespace": "default"},
        "spec": {"value": value},
    }


class _StaticLister:
    def __init__(self, docs: list[dict] | None = None, error: Exception | None = None) -> None:
        self._docs = docs or []
        self._error = error
        self.calls: list[tuple[str, str, str, str]] = []

    async def list(self, kind: str, namespace: str = "", label_selector: str = "", field_selector: str = "") -> list:
        self.calls.append((kind, namespace, label_selector, field_selector))
        if self._error is not None:
            raise self._error
        return [ListedResource.from_document(doc) for doc in self._docs]


def _client(lister: object = None) -> TestClient:
    return TestClient(create_app(lister=lister), raise_server_exceptions=False)


class TestHealth:
    def test_health(self) -> None:
        response = _client().get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["lister_configured"] is False

    def test_metrics(self) -> None:
        response = _client().get("/metrics")
        assert response.status_code == 200
        assert "kubewatchdiff_iterations_total" in response.text


class TestDiffEndpoint:
    def test_changed(self) -> None:
        response = _client().post(
            "/api/v1/diff",
            json={"resource1": _configmap("a"), "resource2": _configmap("b")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["changed"] is True
        assert "-spec.value: a\n+spec.value: b\n" in body["diff"]

    def test_unchanged(self) -> None:
        response = _client().post(
            "/api/v1/diff",
            json={"resource1": _configmap("a"), "resource2": _configmap("a")},
        )
        assert response.json() == {"diff": NO_DIFFERENCES_MESSAGE, "changed": False}

    def test_custom_scope(self) -> None:
        old = {"kind": "ConfigMap", "apiVersion": "v1", "metadata": {"name": "c"}, "data": {"k": "1"}}
        new = {"kind": "ConfigMap", "apiVersion": "v1", "metadata": {"name": "c"}, "data": {"k": "2"}}
        response = _client().post("/api/v1/diff", json={"resource1": old, "resource2": new, "scope": ["data"]})
        assert "+data.k: 2" in response.json()["diff"]

    def test_missing_field_is_400(self) -> None:
        response = _client().post("/api/v1/diff", json={"resource1": {}})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "INVALID_REQUEST"
        assert "resource2" in body["detail"]


class TestWatchEndpoint:
    def test_watch_single_iteration(self) -> None:
        lister = _StaticLister([_configmap("a")])
        response = _client(lister).post(
            "/api/v1/watch",
            json={"kind": "ConfigMap", "namespace": "default", "iterations": 1},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["output"].startswith("# iteration 1\n\ndiff configmap.v1 default/cfg\n")
        assert body["iterations"] == 1
        assert lister.calls == [("ConfigMap", "default", "", "")]

    def test_watch_empty_listing_returns_sentinel(self) -> None:
        response = _client(_StaticLister([])).post("/api/v1/watch", json={"kind": "Pod", "iterations": 1})
        assert response.json()["output"] == NO_CHANGES_MESSAGE

    def test_out_of_range_values_are_clamped(self) -> None:
        response = _client(_StaticLister([])).post(
            "/api/v1/watch",
            json={"kind": "Pod", "iterations": 0, "interval_seconds": 100_000},
        )
        assert response.status_code == 200
        assert response.json()["iterations"] == 1
        assert response.json()["interval_seconds"] == 600

    def test_listing_failure_is_502(self) -> None:
        lister = _StaticLister(error=RuntimeError("401 Unauthorized"))
        response = _client(lister).post("/api/v1/watch", json={"kind": "Pod", "iterations": 1})
        assert response.status_code == 502
        assert response.json() == {
            "error": "LISTING_FAILED",
            "detail": "failed to list Pod resources: 401 Unauthorized",
        }

    def test_no_lister_is_503(self) -> None:
        response = _client().post("/api/v1/watch", json={"kind": "Pod"})
        assert response.status_code == 503
        assert response.json()["error"] == "LISTER_UNAVAILABLE"

    def test_empty_kind_is_400(self) -> None:
        response = _client(_StaticLister()).post("/api/v1/watch", json={"kind": ""})
        assert response.status_code == 400


@settings(max_examples=30, deadline=None)
@given(payload=st.dictionaries(st.sampled_from(["resource1", "resource2", "ignore_status", "x"]), st.integers()))
def test_diff_fuzz_never_500(payload: dict) -> None:
    response = _client().post("/api/v1/diff", json=payload)
    assert response.status_code in (200, 400)
    assert "error" in response.json() or "diff" in response.json()
