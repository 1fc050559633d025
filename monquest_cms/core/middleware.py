"""CORS and request logging middleware."""

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from monquest_cms.core.config import settings

logger = logging.getLogger("monquest")

# Responses the admin client reconciles against; proxies must not serve them stale.
NO_STORE_PREFIXES = ("/api/auth/", "/api/notifications")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log it with the caller's user id."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["X-Request-Id"] = request_id
        response.headers["X-Response-Time-Ms"] = str(elapsed_ms)
        if request.url.path.startswith(NO_STORE_PREFIXES):
            response.headers["Cache-Control"] = "no-store"

        logger.info(
            "[%s] %s %s -> %s in %sms (user=%s)",
            request_id[:8],
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.headers.get("x-user-id", "-"),
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Notification-Created", "X-Request-Id"],
    )
    app.add_middleware(RequestIdMiddleware)
