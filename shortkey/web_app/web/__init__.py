"""Web routes."""

from .routes import redirect_route

__all__ = ["redirect_route"]
