"""Structural diff engine.

Submodules:
    filters  -- Symmetric document filters (drop status, trim metadata).
    differ   -- Deterministic recursive diff producing ChangeSets.
    renderer -- Git-style text rendering with throttled timestamps.
    compare  -- One-shot diff of two resource versions.
"""

from kubewatchdiff.diff.compare import diff_resources, parse_document
from kubewatchdiff.diff.differ import compute_diff, compute_removal, is_skeleton
from kubewatchdiff.diff.filters import apply_filters
from kubewatchdiff.diff.renderer import DiffRenderer

__all__ = [
    "DiffRenderer",
    "apply_filters",
    "compute_diff",
    "compute_removal",
    "diff_resources",
    "is_skeleton",
    "parse_document",
]
