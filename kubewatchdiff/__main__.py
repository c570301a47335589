"""Entry point for `python -m kubewatchdiff`.

Usage:
    python -m kubewatchdiff watch Deployment -n default --iterations 3
    python -m kubewatchdiff diff old.yaml new.yaml
"""

from __future__ import annotations

from kubewatchdiff.cli import cli

cli()
