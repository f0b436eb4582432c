"""웹훅 설정 서비스 — 사용자별 단일 웹훅 조회/저장.

Webhook Service — Read and save the caller's single webhook config.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.models.webhook import Webhook
from app.repositories.webhook_repository import webhook_repository
from app.schemas.webhook import WebhookResponse, WebhookUpdate

logger = structlog.get_logger()


class WebhookService:
    """웹훅 설정 비즈니스 로직을 처리하는 서비스."""

    async def get_config(self, db: AsyncSession, user: User) -> WebhookResponse:
        """저장된 설정, 없으면 빈 비활성 설정 — Empty disabled config when unsaved."""
        webhook: Webhook | None = await webhook_repository.get_for_user(db, user.id)
        if webhook is None:
            return WebhookResponse()
        return WebhookResponse(url=webhook.url, enabled=webhook.enabled)

    async def save_config(self, db: AsyncSession, user: User, data: WebhookUpdate) -> WebhookResponse:
        webhook: Webhook = await webhook_repository.upsert(db, user.id, data.url, data.enabled)
        logger.info("webhook_saved", user_id=str(user.id), enabled=webhook.enabled)
        return WebhookResponse(url=webhook.url, enabled=webhook.enabled)


# 싱글턴 인스턴스 — Singleton instance
webhook_service: WebhookService = WebhookService()
