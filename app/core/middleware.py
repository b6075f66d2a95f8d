import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import get_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and response with timing, and tags both with a
    request id that is echoed back in the X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        method = request.method
        path = request.url.path

        req_logger = get_logger("app.access", request_id=request_id)
        req_logger.info(
            f"Request received: {method} {path}",
            extra={"http": {"method": method, "path": path}},
        )

        start_time = time.time()
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            req_logger.error(
                f"Request failed: {e}",
                extra={"http": {"processing_time": process_time, "error": str(e)}},
            )
            raise

        process_time = time.time() - start_time
        response.headers["X-Request-ID"] = request_id
        req_logger.info(
            f"Response sent: {response.status_code} in {process_time:.3f}s",
            extra={"http": {"status_code": response.status_code, "processing_time": process_time}},
        )
        return response
