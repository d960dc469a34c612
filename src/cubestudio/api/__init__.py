"""HTTP API for the cube studio."""

from .app import init_app

__all__ = ["init_app"]
