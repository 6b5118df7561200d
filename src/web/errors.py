"""Structured API errors.

Every failure the API reports has the same JSON body:
``{"error": <code>, "message": <text>, "retryable": <bool>}`` plus
``retryAfter`` (seconds) for rate limits.
"""

from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class APIError(Exception):
    status_code = 500
    code = "internal_error"
    retryable = False

    def __init__(self, message: str, retryable: Optional[bool] = None):
        super().__init__(message)
        self.message = message
        if retryable is not None:
            self.retryable = retryable

    def body(self) -> dict:
        return {"error": self.code, "message": self.message, "retryable": self.retryable}

    def headers(self) -> dict:
        return {}


class RequestValidationFailed(APIError):
    status_code = 400
    code = "validation_error"
    retryable = False


class NotFound(APIError):
    status_code = 404
    code = "not_found"
    retryable = False


class RateLimitExceeded(APIError):
    status_code = 429
    code = "rate_limit_exceeded"
    retryable = True

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after

    def body(self) -> dict:
        return {**super().body(), "retryAfter": self.retry_after}

    def headers(self) -> dict:
        return {"Retry-After": str(self.retry_after)}


class UpstreamLLMError(APIError):
    status_code = 502
    code = "llm_error"
    retryable = False


class LLMUnavailable(APIError):
    status_code = 503
    code = "llm_unavailable"
    retryable = False


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.info(
            "api.error",
            path=request.url.path,
            status=exc.status_code,
            error=exc.code,
            message=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=exc.headers())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _format_validation_errors(exc)
        logger.info("api.invalid_request", path=request.url.path, message=message)
        return JSONResponse(
            status_code=422,
            content={"error": "validation_error", "message": message, "retryable": False},
        )
