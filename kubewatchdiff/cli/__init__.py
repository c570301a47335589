"""kubewatchdiff command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubewatchdiff`` script).
"""

from kubewatchdiff.cli.main import cli

__all__ = ["cli"]
