"""Middleware for the shortkey web app."""

from .logging import RedirectLoggingMiddleware

__all__ = ["RedirectLoggingMiddleware"]
