"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Ships one structured event per API request to Axiom: method, path, params,
masked request body, status code, duration and the error message of failed
responses. Credentials (passwords, tokens, activation codes, API keys) are
masked before anything leaves the process.
"""

import json
import re
import time
from typing import Any

import structlog
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = structlog.get_logger()

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and params
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api[_-]?key|activation_code|key_hash|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

# 오류 메시지 최대 길이 — Max length of the logged error message
_ERROR_MAX_LEN = 500


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹 — Recursively mask sensitive fields."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _error_message(body: bytes) -> str:
    """오류 응답 본문에서 메시지 추출 — Pull the message out of an error body."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_ERROR_MAX_LEN]
    if isinstance(payload, dict) and "error" in payload:
        message = str(payload["error"])
    else:
        message = str(payload)
    return message[:_ERROR_MAX_LEN]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Passes requests straight through when AXIOM_API_TOKEN or AXIOM_DATASET
    is empty.
    """

    def __init__(self, app: Any, client: AxiomClient | None = None) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = client

        if self._client is None and settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS or self._client is None:
            return await call_next(request)

        start_time = time.perf_counter()
        method = request.method

        request_body: Any = None
        if method in ("POST", "PUT", "PATCH"):
            body_bytes = await request.body()
            if body_bytes:
                try:
                    request_body = _mask(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    request_body = "(non-json body)"

        event: dict[str, Any] = {
            "method": method,
            "path": request.url.path,
            "api_key_auth": "x-api-key" in request.headers,
        }
        if request.query_params:
            event["query_params"] = _mask(dict(request.query_params))
        if request_body is not None:
            event["request_body"] = request_body

        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 오류 응답은 본문을 읽어 메시지를 기록 — Read error bodies for the message
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = _error_message(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["status_code"] = status_code
            event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            request_id = structlog.contextvars.get_contextvars().get("request_id")
            if request_id:
                event["request_id"] = request_id
            self._ship(event)

        return response

    def _ship(self, event: dict[str, Any]) -> None:
        """Axiom 전송, 실패는 경고 로그만 남김 — Ingest; failures only log a warning."""
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:  # noqa: BLE001
            logger.warning("axiom_ingest_failed", error=str(exc), path=event.get("path"))
