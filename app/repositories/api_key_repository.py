"""API 키 레포지토리.

API Key Repository — Per-user key listing and prefix lookup for
authentication.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.api_key import ApiKey
from app.repositories.base import BaseRepository


class ApiKeyRepository(BaseRepository[ApiKey]):
    """API 키 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ApiKey)

    async def list_for_user(self, db: AsyncSession, user_id: UUID) -> list[ApiKey]:
        """사용자의 API 키 목록, 최신순 — Keys of a user, newest first."""
        query: Select = (
            select(ApiKey)
            .where(ApiKey.user_id == user_id)
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_name(self, db: AsyncSession, user_id: UUID, name: str) -> ApiKey | None:
        query: Select = select(ApiKey).where(ApiKey.user_id == user_id, ApiKey.name == name)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_prefix(self, db: AsyncSession, key_prefix: str) -> list[ApiKey]:
        """접두어가 같은 활성 키 — Enabled keys sharing the lookup prefix."""
        query: Select = select(ApiKey).where(
            ApiKey.key_prefix == key_prefix,
            ApiKey.enabled.is_(True),
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_for_user(self, db: AsyncSession, user_id: UUID) -> int:
        query: Select = select(func.count()).select_from(ApiKey).where(ApiKey.user_id == user_id)
        return (await db.execute(query)).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
api_key_repository: ApiKeyRepository = ApiKeyRepository()
