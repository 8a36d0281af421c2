"""HTTP front end that resolves keys to redirects."""

from .app_factory import create_app

__all__ = ["create_app"]
