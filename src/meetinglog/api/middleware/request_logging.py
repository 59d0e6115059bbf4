# Request logging with correlation IDs for the archive service

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("meetinglog.api")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a request id (taken from X-Request-ID when the
    proxy already set one), logs completion with timing, and echoes the id
    back in the response headers.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        log_extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        logger.debug("Request started", extra=log_extra)
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed",
                extra={**log_extra, "duration_ms": _elapsed_ms(started), "error": str(e)},
            )
            raise

        logger.info(
            "Request completed",
            extra={
                **log_extra,
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
