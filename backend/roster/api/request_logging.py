"""Access Logging: one structured log line per HTTP request."""

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger("roster.access")


def register_request_logging(app: FastAPI) -> None:
    """Attach the access-log middleware to the app."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "client": request.client.host if request.client else None,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response
