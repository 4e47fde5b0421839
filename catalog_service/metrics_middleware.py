"""
Request metrics middleware.

Every request is counted and timed under its route template, so
`/api/products/3f2a...` and `/api/products/91bc...` share one label set.
Requests that match no route are grouped under `unmatched`.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Route template of the matched route, e.g. `/api/users/{user_id}`."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Feeds catalog request counts and latencies to a tracking callback.

    Args:
        app: ASGI application to wrap
        track_func: Called with (method, endpoint, status_code, duration)
            once the response is ready
    """

    def __init__(self, app, track_func: Callable):
        super().__init__(app)
        self.track_func = track_func

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)

        # Routing has populated the scope by the time the response returns
        self.track_func(
            method=request.method,
            endpoint=endpoint_label(request),
            status_code=response.status_code,
            duration=time.perf_counter() - start_time,
        )
        return response
