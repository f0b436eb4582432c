"""전역 예외 핸들러 — 모든 오류를 {"error": message} 형태로 반환.

Global exception handlers. Every failure leaves the API as
``{"error": "<message>"}``.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


def _first_validation_message(errors: list[dict[str, Any]]) -> str:
    """첫 번째 검증 오류 메시지 — First validation error as a readable string."""
    if not errors:
        return "Invalid request"
    first: dict[str, Any] = errors[0]
    location: str = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message: str = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


def setup_error_handlers(app: FastAPI) -> None:
    """전역 예외 핸들러를 등록합니다 — Register global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """요청 검증 실패는 400 — Request validation failures map to 400."""
        return JSONResponse(
            status_code=400,
            content={"error": _first_validation_message(list(exc.errors()))},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """처리되지 않은 예외 — Catch-all, logged with the request path."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )
