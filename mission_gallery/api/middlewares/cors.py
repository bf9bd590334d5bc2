"""CORS middleware for the browser front end.

Presigned PUTs go straight to the object store, so only the JSON API
needs these headers.
"""

import logging
from typing import Awaitable
from typing import Callable

from fastapi import Request
from fastapi import Response


logger = logging.getLogger(__name__)


def make_cors_middleware(
    allowed_origins: list[str],
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    allow_any = "*" in allowed_origins

    async def cors_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        origin = request.headers.get("Origin", "")

        if request.method == "OPTIONS":
            logger.debug(f"CORS preflight for {request.url.path}")
            response = Response(status_code=204)
        else:
            response = await call_next(request)

        if allow_any:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        else:
            return response

        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "*"
        response.headers["Access-Control-Max-Age"] = "86400"

        if request.method == "OPTIONS" and "Access-Control-Request-Headers" in request.headers:
            response.headers["Access-Control-Allow-Headers"] = request.headers["Access-Control-Request-Headers"]

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response

    return cors_middleware
