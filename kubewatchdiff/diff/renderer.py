"""Git-style text rendering of change sets.

A report looks like::

    12:04:05 diff deployment.apps/v1 default/web
    --------------------------------------------------------------------------------
    -spec.replicas: 2
    +spec.replicas: 3

Scalar payloads render as ``<sign><path>: <value>``.  Map and list
payloads render as ``<sign><path>:`` followed by a YAML body with sorted
keys, every line carrying the sign and two spaces of indent per nesting
level.  Each list index on the path adds two more spaces after the sign.
Subtrees of a new or deleted resource render as ``+ spec:`` sections.
Values that cannot be pretty-printed fall back to ``repr`` so a single
odd value never fails a whole watch.
"""

from __future__ import annotations

import json
from datetime import datetime

import structlog
import yaml

from kubewatchdiff.clock import Clock, SystemClock
from kubewatchdiff.models.document import Document, is_container
from kubewatchdiff.models.resources import ChangeEntry, ChangeSet, ResourceIdentity

_log = structlog.get_logger(component="diff.renderer")

SEPARATOR_WIDTH = 80
NEW_RESOURCE_MARKER = "+ New Resource"
DELETED_RESOURCE_MARKER = "- Deleted Resource"

_SEPARATOR = "-" * SEPARATOR_WIDTH
_TIMESTAMP_FORMAT = "%H:%M:%S"
_TIMESTAMP_MIN_GAP_SECONDS = 1.0
# Wide enough that PyYAML never folds a long scalar across lines.
_YAML_WIDTH = 1 << 16


class _NoAliasDumper(yaml.SafeDumper):
    """SafeDumper that never emits &anchors for repeated references."""

    def ignore_aliases(self, data: object) -> bool:
        return True


class DiffRenderer:
    """Render change sets for one watch session.

    The renderer is stateful only for timestamp throttling: a timestamp is
    emitted at most once per second per instance, tracked in
    ``last_timestamp``.
    """

    def __init__(self, show_timestamp: bool = False, clock: Clock | None = None) -> None:
        self._show_timestamp = show_timestamp
        self._clock: Clock = clock or SystemClock()
        self.last_timestamp: datetime | None = None

    @property
    def show_timestamp(self) -> bool:
        return self._show_timestamp

    def render(self, identity: ResourceIdentity, changes: ChangeSet) -> str:
        """Return the report for *changes*, or "" when there is nothing to show."""
        if not changes:
            return ""

        lines = [self._timestamp_prefix() + render_header(identity), _SEPARATOR]
        if changes.new_resource:
            lines.append(NEW_RESOURCE_MARKER)
        if changes.deleted_resource:
            lines.append(DELETED_RESOURCE_MARKER)
        whole = changes.new_resource or changes.deleted_resource
        for entry in changes:
            lines.extend(render_section(entry) if whole else render_entry(entry))
        return "\n".join(lines) + "\n\n"

    def _timestamp_prefix(self) -> str:
        if not self._show_timestamp:
            return ""
        now = self._clock.now()
        last = self.last_timestamp
        if last is not None and (now - last).total_seconds() < _TIMESTAMP_MIN_GAP_SECONDS:
            return ""
        self.last_timestamp = now
        return now.strftime(_TIMESTAMP_FORMAT) + " "


def render_header(identity: ResourceIdentity) -> str:
    """``diff <kind>.<apiVersion> <namespace>/<name>``; no namespace when cluster-scoped."""
    kind = identity.kind.lower()
    resource_type = f"{kind}.{identity.api_version}" if identity.api_version else kind
    location = f"{identity.namespace}/{identity.name}" if identity.namespace else identity.name
    return f"diff {resource_type} {location}"


def render_entry(entry: ChangeEntry) -> list[str]:
    """Render one change entry as signed lines.

    Every list index on the path indents the entry two more spaces, so an
    element change reads ``-  spec.containers[0].image: nginx:1.24``.
    """
    depth = sum(1 for token in entry.path if isinstance(token, int))
    lead = entry.kind.sign + "  " * depth
    return _signed_lines(entry, head=lead, body=lead + "  ")


def render_section(entry: ChangeEntry) -> list[str]:
    """Render a whole top-level subtree of a new or deleted resource as ``+ spec:``."""
    sign = entry.kind.sign
    return _signed_lines(entry, head=sign + " ", body=sign + "  ")


def _signed_lines(entry: ChangeEntry, head: str, body: str) -> list[str]:
    path = entry.dotted_path
    payload = entry.payload

    if not (is_container(payload) and payload):
        return [f"{head}{path}: {format_scalar(payload)}"]

    lines = _pretty_lines(payload, path)
    if lines is None:
        return [f"{head}{path}: {_fallback(payload)}"]
    return [f"{head}{path}:", *(f"{body}{line}" for line in lines)]


def format_scalar(value: object) -> str:
    """Single-line text for a scalar (or empty container) payload."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return json.dumps(value)
        case str():
            # Empty or multi-line strings are quoted so each leaf stays on one line.
            if value.splitlines() != [value]:
                return json.dumps(value)
            return value
        case dict() | list() if not value:
            return "{}" if isinstance(value, dict) else "[]"
        case _:
            _log.warning("payload_render_degraded", value_type=type(value).__name__)
            return _fallback(value)


def _pretty_lines(payload: Document, path: str) -> list[str] | None:
    """YAML body lines for a container payload, or None if it cannot be printed."""
    if _contains_cycle(payload):
        _log.warning("payload_render_degraded", path=path, reason="cyclic value")
        return None
    try:
        text = yaml.dump(
            payload,
            Dumper=_NoAliasDumper,
            default_flow_style=False,
            sort_keys=True,
            indent=2,
            allow_unicode=True,
            width=_YAML_WIDTH,
        )
    except (yaml.YAMLError, TypeError, ValueError, RecursionError) as exc:
        _log.warning("payload_render_degraded", path=path, reason=str(exc))
        return None
    return text.splitlines()


def _contains_cycle(value: object, ancestors: frozenset[int] = frozenset()) -> bool:
    if not isinstance(value, (dict, list, tuple)):
        return False
    marker = id(value)
    if marker in ancestors:
        return True
    ancestors = ancestors | {marker}
    children = value.values() if isinstance(value, dict) else value
    return any(_contains_cycle(child, ancestors) for child in children)


def _fallback(value: object) -> str:
    try:
        return repr(value)
    except Exception:  # noqa: BLE001
        return f"<unrenderable {type(value).__name__}>"
