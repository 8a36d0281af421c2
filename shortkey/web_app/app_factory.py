"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI

from shortkey.config import Config
from shortkey.lib.store import URLStore
from .web import redirect_route
from .middleware.logging import RedirectLoggingMiddleware


def create_app(
    store: URLStore,
    config: Optional[Config] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store: Store that keys are resolved against
        config: Configuration instance
        logger: Optional request logger

    Returns:
        Configured FastAPI app
    """
    # No docs or schema routes: every path is a potential key.
    app = FastAPI(
        title="shortkey",
        description="Resolves short keys to their registered URLs",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.store = store
    app.state.config = config

    app.add_middleware(RedirectLoggingMiddleware, logger=logger)

    app.router.routes.append(redirect_route)

    return app
