"""
middleware.py - HTTP middleware for the product service

Registered by create_app in this order (outermost first):

    request logging  ->  origin allowlist  ->  CORS headers  ->  routes

Request logging writes one JSON log line per request, correlated by the
X-Request-ID header (generated when the client does not send one).

The origin allowlist rejects browser requests from any origin other than the
configured frontend before a route runs. Requests without an Origin header
(curl, other services) are not cross-origin requests and pass through.
"""

import logging
import time
from typing import Awaitable, Callable, Iterable
from uuid import uuid4

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]


async def log_requests(request: Request, call_next: CallNext) -> Response:
    """Log method, path, status and duration for every request."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex[:16]
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.error(
            f"{request.method} {request.url.path} failed {duration_ms:.2f}ms",
            exc_info=True,
            extra={"correlation_id": request_id},
        )
        raise

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {duration_ms:.2f}ms",
        extra={"correlation_id": request_id},
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def origin_allowlist(allowed_origins: Iterable[str]):
    """Build a middleware that answers 403 to requests from unknown origins."""
    allowed = frozenset(allowed_origins)

    async def reject_unknown_origins(request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get("origin")
        if origin is not None and origin not in allowed:
            logger.warning(f"Rejected {request.method} {request.url.path} from origin {origin}")
            return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": "Origin not allowed"})
        return await call_next(request)

    return reject_unknown_origins


def register_middleware(app: FastAPI, allowed_origins: Iterable[str]) -> None:
    allowed_origins = list(allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.middleware("http")(origin_allowlist(allowed_origins))
    app.middleware("http")(log_requests)
