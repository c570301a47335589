"""kubewatchdiff: watch Kubernetes resources and render structural diffs."""

__version__ = "0.1.0"
