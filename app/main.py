"""FastAPI 애플리케이션 엔트리포인트 — 로깅, 예외 핸들러, 미들웨어, 라우터 등록.

FastAPI application entry point — Logging, exception handlers, middleware
and router registration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.middleware.error_handler import setup_error_handlers
from app.middleware.request_id import RequestIdMiddleware
from app.utils.logging import setup_logging

setup_logging(settings)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

setup_error_handlers(app)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# RequestId보다 먼저 등록하여 요청 ID 컨텍스트 안에서 실행
# (Added before RequestId so it runs inside the request id context)
app.add_middleware(AxiomLoggingMiddleware)
app.add_middleware(RequestIdMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# auth_router: 가입, 로그인, 토큰, 활성화 코드 (Sign-up, sign-in, tokens, activation)
# app_router: 메일함, 웹훅, API 키 (Mailboxes, webhook, API keys)
# admin_router: 사용자, 학생, 활성화 코드 관리 (Users, students, activation codes)
from app.api.auth import router as auth_router  # noqa: E402
from app.api.admin import admin_router  # noqa: E402
from app.api.app import app_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(app_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1/admin")
