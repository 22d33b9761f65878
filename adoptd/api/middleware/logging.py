# 📄 File: adoptd/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request: what was asked for, how it went and how long it took,
# without ever writing down passwords or tokens.
# 🧪 Purpose (Technical Summary):
# Request logging middleware. Assigns or propagates X-Request-ID, runs the request
# inside log_context so every structured log line carries it, and logs method, path,
# status and duration with slow-request warnings.
# 🔗 Dependencies:
# starlette BaseHTTPMiddleware, adoptd.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# adoptd.main (middleware registration)

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from adoptd.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

EXCLUDED_PATHS = {"/health", "/api/v1/health", "/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured request/response logging with request-id correlation.
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.request_id_header = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.request_id_header) or str(uuid.uuid4())
        request.state.request_id = request_id

        if request.url.path in EXCLUDED_PATHS:
            response = await call_next(request)
            response.headers[self.request_id_header] = request_id
            return response

        with log_context(request_id=request_id):
            start_time = time.time()
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} failed: {e}",
                    exc_info=True,
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )
                raise

            duration = time.time() - start_time
            fields = {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
                "client_ip": request.client.host if request.client else None,
            }
            if duration > self.slow_request_threshold:
                logger.warning(f"Slow request {request.method} {request.url.path}", **fields)
            elif response.status_code >= 500:
                logger.error(f"{request.method} {request.url.path} -> {response.status_code}", **fields)
            else:
                logger.info(f"{request.method} {request.url.path} -> {response.status_code}", **fields)

        response.headers[self.request_id_header] = request_id
        return response
