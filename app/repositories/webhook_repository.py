"""웹훅 레포지토리 — 사용자별 단일 웹훅 설정 쿼리.

Webhook Repository — Queries for the single webhook row per user.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.webhook import Webhook
from app.repositories.base import BaseRepository


class WebhookRepository(BaseRepository[Webhook]):
    """웹훅 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Webhook)

    async def get_for_user(self, db: AsyncSession, user_id: UUID) -> Webhook | None:
        query: Select = select(Webhook).where(Webhook.user_id == user_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def upsert(self, db: AsyncSession, user_id: UUID, url: str, enabled: bool) -> Webhook:
        """설정 저장 — Insert the row on first save, update it afterwards."""
        webhook: Webhook | None = await self.get_for_user(db, user_id)
        if webhook is None:
            return await self.create(db, {"user_id": user_id, "url": url, "enabled": enabled})
        return await self.update(db, webhook, {"url": url, "enabled": enabled})

    async def count_for_user(self, db: AsyncSession, user_id: UUID) -> int:
        query: Select = select(func.count()).select_from(Webhook).where(Webhook.user_id == user_id)
        return (await db.execute(query)).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
webhook_repository: WebhookRepository = WebhookRepository()
