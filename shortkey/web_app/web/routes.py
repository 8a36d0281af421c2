"""Redirect route.

Every request, whatever its method or path, lands here. The last segment of
the path is taken as the key, so ``/k3xq9a``, ``/any/prefix/k3xq9a`` and
``/k3xq9a?utm=x`` all resolve the same entry.
"""

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.routing import Route


def last_path_segment(path: str) -> str:
    """Return the final segment of ``path``, ignoring trailing slashes."""
    return path.rstrip("/").rsplit("/", 1)[-1]


def redirect_to_url(request: Request) -> Response:
    """Redirect to the URL stored under the last path segment."""
    store = request.app.state.store

    key = last_path_segment(request.path_params.get("path", ""))
    original_url = store.resolve(key) if key else None

    if original_url is None:
        return JSONResponse(
            {"detail": f"Key '{key}' not found"},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)


class RedirectEndpoint:
    """ASGI endpoint wrapping :func:`redirect_to_url`.

    Starlette only restricts methods for plain function endpoints, so a
    callable object is routed for every method, including WebDAV and
    custom ones.
    """

    async def __call__(self, scope, receive, send):
        request = Request(scope, receive)
        # Off the event loop: resolving may wait on the store lock.
        response = await run_in_threadpool(redirect_to_url, request)
        await response(scope, receive, send)


redirect_route = Route("/{path:path}", endpoint=RedirectEndpoint(), include_in_schema=False)
