"""Request logging middleware for the CRM API."""

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


def register_middleware(app: FastAPI) -> None:
    """Time every request, expose the duration and log the outcome."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"

        level = logging.WARNING if response.status_code >= 500 else logging.DEBUG
        logger.log(
            level,
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed * 1000,
        )
        return response
