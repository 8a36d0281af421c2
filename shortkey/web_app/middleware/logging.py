"""Redirect logging middleware."""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from ..web.routes import last_path_segment


class RedirectLoggingMiddleware(BaseHTTPMiddleware):
    """Logs which key each request asked for and where it was sent."""

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortkey.web")

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        key = last_path_segment(request.url.path)
        location = response.headers.get("location")
        if location is not None:
            self.logger.info(f"{request.method} {key} -> {location}")
        else:
            self.logger.info(f"{request.method} {key!r} not found ({response.status_code})")

        return response
