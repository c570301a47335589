"""Pydantic request/response schemas for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kubewatchdiff.models.config import DEFAULT_INTERVAL_SECONDS, DEFAULT_ITERATIONS


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    lister_configured: bool


class DiffRequest(BaseModel):
    """Two versions of the same resource to compare."""

    resource1: dict[str, Any] = Field(description="Older version of the resource")
    resource2: dict[str, Any] = Field(description="Newer version of the resource")
    ignore_status: bool = False
    ignore_meta: bool = False
    scope: list[str] | None = Field(default=None, description="Top-level keys to compare (default spec, status)")


class DiffResponse(BaseModel):
    diff: str
    changed: bool


class WatchRequest(BaseModel):
    """Parameters of a bounded watch.

    ``interval_seconds`` and ``iterations`` are clamped to their allowed
    range rather than rejected.
    """

    kind: str = Field(min_length=1)
    namespace: str = ""
    label_selector: str = ""
    field_selector: str = ""
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    iterations: int = DEFAULT_ITERATIONS
    ignore_status: bool = False
    ignore_meta: bool = False
    show_timestamp: bool = False


class WatchResponse(BaseModel):
    output: str
    iterations: int
    interval_seconds: int
