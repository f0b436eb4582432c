"""앱 API 라우터 패키지 — 사용자용 엔드포인트 통합.

App API Router package — Aggregates the self-service endpoints into a
single router mounted at /api/v1.

Included routers:
    - emails: 내 메일함, 메시지, 영구 메일함 (Own mailboxes and messages)
    - webhook: 웹훅 설정 (Webhook config)
    - api_keys: API 키 관리 (API key management)
"""

from fastapi import APIRouter

from app.api.app.api_keys import router as api_keys_router
from app.api.app.emails import router as emails_router
from app.api.app.webhook import router as webhook_router

app_router: APIRouter = APIRouter()

app_router.include_router(emails_router, prefix="/emails", tags=["Emails"])
app_router.include_router(webhook_router, prefix="/webhook", tags=["Webhook"])
app_router.include_router(api_keys_router, prefix="/api-keys", tags=["API Keys"])
