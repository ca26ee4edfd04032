"""
Request Context Middleware
==========================

Starlette middleware for request processing.

Features:
- Request ID generation for tracing
- Request timing headers
- Request completion logging
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from contacerta.core.logging import get_logger, request_id_context

# Initialize logger
logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request ID to the logging context and times the request.

    Token validation is not done here; it happens in the dependency layer.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_context.set(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_processing_error",
                error=str(e),
                path=request.url.path,
                method=request.method,
            )
            raise
        finally:
            request_id_context.reset(token)

        process_time = time.perf_counter() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(process_time * 1000, 2),
        )
        return response
