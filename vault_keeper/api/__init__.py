"""HTTP API for the vault."""

from .app import create_app

__all__ = ["create_app"]
