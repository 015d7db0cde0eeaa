"""Request/response logging middleware."""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from signon.core.logging_config import mask_ip

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with an ID and timing.

    Only the path is logged: callback query strings carry authorization
    codes and state values.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        request_id = str(uuid.uuid4())
        start_time = time.time()

        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"

        logger.info(
            f"Request started | "
            f"id={request_id} | "
            f"method={method} | "
            f"path={path} | "
            f"ip={mask_ip(client_host)}"
        )

        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(
                f"Request failed | "
                f"id={request_id} | "
                f"method={method} | "
                f"path={path} | "
                f"duration={duration_ms}ms | "
                f"error={type(e).__name__}"
            )
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Request completed | "
            f"id={request_id} | "
            f"method={method} | "
            f"path={path} | "
            f"status={response.status_code} | "
            f"duration={duration_ms}ms"
        )

        response.headers["X-Request-ID"] = request_id
        return response
