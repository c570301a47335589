"""REST API layer for kubewatchdiff.

Exposes:
    create_app -- FastAPI application factory.
"""

from kubewatchdiff.api.app import create_app

__all__ = ["create_app"]
