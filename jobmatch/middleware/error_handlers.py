"""
Request boundary middleware for the Job Match API

ExceptionHandlerMiddleware turns JobMatchBaseException subclasses into JSON
error bodies; RequestLoggingMiddleware and PerformanceMiddleware log each
request and stamp X-Processing-Time.
"""
import time
import traceback
import uuid
from datetime import datetime
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from jobmatch.utils.exceptions import JobMatchBaseException, map_to_http_exception
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Build the error body shared by every failed request."""
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    body: Dict[str, Any] = {
        "success": False,
        "timestamp": datetime.utcnow().isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail,
    }
    return JSONResponse(status_code=status_code, content=body, headers={"X-Request-ID": request_id})


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Maps domain exceptions to status codes; anything else becomes a bare 500"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"

        logger.info(
            f"Request started: {route}",
            extra={
                "request_id": request_id,
                "query_params": dict(request.query_params),
                "user_id": request.headers.get("x-user-id"),
                "client_ip": _client_ip(request),
            }
        )

        try:
            response = await call_next(request)
        except JobMatchBaseException as exc:
            http_exc = map_to_http_exception(exc)
            log = logger.error if http_exc.status_code >= 500 else logger.warning
            log(
                f"{exc.__class__.__name__} in {route}: {exc.message}",
                extra={
                    "request_id": request_id,
                    "error_code": exc.error_code,
                    "details": exc.details,
                    "status_code": http_exc.status_code,
                }
            )
            return error_response(request_id, http_exc.status_code, http_exc.detail)
        except Exception as exc:
            logger.error(
                f"Unhandled exception in {route}: {exc}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )
            # Internal details stay in the logs
            return error_response(request_id, 500, {"error": "Internal server error", "message": "Server error"})

        logger.info(
            f"Request completed: {route} - {response.status_code}",
            extra={"request_id": request_id, "status_code": response.status_code}
        )
        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Per-request debug line and response status; upload bodies are never logged"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = _request_id(request)

        logger.debug(
            f"Request details: {request.method} {request.url}",
            extra={
                "request_id": request_id,
                "content_type": request.headers.get("content-type"),
                "content_length": request.headers.get("content-length"),
                "client_ip": _client_ip(request),
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {elapsed:.3f}s",
                extra={"request_id": request_id, "processing_time": elapsed, "exception": str(exc)}
            )
            raise

        elapsed = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {elapsed:.3f}s",
            extra={"request_id": request_id, "status_code": response.status_code, "processing_time": elapsed}
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Sets X-Processing-Time and warns about requests slower than the threshold"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        elapsed = time.time() - start_time

        if elapsed > self.slow_request_threshold:
            # full-corpus ranking is the usual culprit
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {elapsed:.3f}s",
                extra={
                    "request_id": _request_id(request),
                    "processing_time": elapsed,
                    "threshold": self.slow_request_threshold,
                }
            )

        response.headers["X-Processing-Time"] = f"{elapsed:.3f}"
        return response
