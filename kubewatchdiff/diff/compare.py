"""One-shot comparison of two versions of the same resource."""

from __future__ import annotations

from collections.abc import Sequence

import yaml

from kubewatchdiff.diff.differ import compute_diff
from kubewatchdiff.diff.filters import apply_filters
from kubewatchdiff.diff.renderer import DiffRenderer
from kubewatchdiff.errors import DocumentParseError
from kubewatchdiff.models.document import Document
from kubewatchdiff.models.resources import DEFAULT_DIFF_SCOPE, FilterConfig, ResourceIdentity

NO_DIFFERENCES_MESSAGE = "No differences found between the two resource versions."


def parse_document(text: str, source: str = "document") -> dict[str, Document]:
    """Parse JSON or YAML *text* into a resource document.

    Raises:
        DocumentParseError: the text is not valid YAML/JSON or is not a mapping.
    """
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentParseError(source, str(exc)) from exc
    if not isinstance(loaded, dict):
        raise DocumentParseError(source, f"expected a mapping, got {type(loaded).__name__}")
    return loaded


def diff_resources(
    old_doc: dict[str, Document],
    new_doc: dict[str, Document],
    filters: FilterConfig | None = None,
    scope: Sequence[str] = DEFAULT_DIFF_SCOPE,
) -> str:
    """Render the diff between two versions of a resource.

    The report header uses the identity of *new_doc*.  Returns
    :data:`NO_DIFFERENCES_MESSAGE` when nothing in scope changed.
    """
    filters = filters or FilterConfig()
    changes = compute_diff(apply_filters(old_doc, filters), apply_filters(new_doc, filters), scope=scope)
    text = DiffRenderer(show_timestamp=False).render(ResourceIdentity.from_document(new_doc), changes)
    return text or NO_DIFFERENCES_MESSAGE
