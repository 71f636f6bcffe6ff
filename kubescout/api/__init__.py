"""REST API package for kubescout.

Exposes:
    create_app -- FastAPI application factory.
"""

from kubescout.api.app import create_app

__all__ = ["create_app"]
