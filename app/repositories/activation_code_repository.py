"""활성화 코드 레포지토리 — 코드 조회, 목록, 통계 쿼리.

Activation Code Repository — Lookup, filtered listing and status statistics.
"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.activation_code import ACTIVATION_CODE_STATUSES, ActivationCode
from app.repositories.base import BaseRepository
from app.utils.pagination import paginate


class ActivationCodeRepository(BaseRepository[ActivationCode]):
    """활성화 코드 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ActivationCode)

    async def get_by_code(self, db: AsyncSession, code: str) -> ActivationCode | None:
        """코드 문자열로 조회 — Exact code match."""
        query: Select = select(ActivationCode).where(ActivationCode.code == code)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_with_user(self, db: AsyncSession, code_id: UUID) -> ActivationCode | None:
        """사용자 정보와 함께 조회 — Load the redeeming user as well."""
        query: Select = (
            select(ActivationCode)
            .options(selectinload(ActivationCode.used_by_user))
            .where(ActivationCode.id == code_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_page(
        self,
        db: AsyncSession,
        status: str | None,
        search: str | None,
        page: int,
        per_page: int,
    ) -> tuple[Sequence[ActivationCode], int]:
        """필터된 코드 목록 한 페이지, 최신순.

        One page of codes filtered by status and code substring, newest first.
        Unknown status values are ignored.
        """
        query: Select = select(ActivationCode).options(selectinload(ActivationCode.used_by_user))
        if status in ACTIVATION_CODE_STATUSES:
            query = query.where(ActivationCode.status == status)
        if search:
            query = query.where(ActivationCode.code.contains(search.upper(), autoescape=True))
        query = query.order_by(ActivationCode.created_at.desc(), ActivationCode.id.desc())
        return await paginate(db, query, page, per_page)

    async def stats(self, db: AsyncSession) -> dict[str, int]:
        """상태별 코드 수 — Count per status across all codes."""
        result = await db.execute(
            select(ActivationCode.status, func.count()).group_by(ActivationCode.status)
        )
        counts: dict[str, int] = {status: 0 for status in ACTIVATION_CODE_STATUSES}
        for status, count in result.all():
            if status in counts:
                counts[status] = count
        return counts

    async def existing_codes(self, db: AsyncSession, codes: set[str]) -> set[str]:
        """이미 저장된 코드 — Which of ``codes`` already exist."""
        if not codes:
            return set()
        result = await db.execute(select(ActivationCode.code).where(ActivationCode.code.in_(codes)))
        return set(result.scalars().all())

    async def create_many(self, db: AsyncSession, rows: list[dict]) -> list[ActivationCode]:
        """코드 일괄 저장 — Insert a batch and flush once."""
        objs: list[ActivationCode] = [ActivationCode(**row) for row in rows]
        db.add_all(objs)
        await db.flush()
        return objs

    async def count_redeemed_by(self, db: AsyncSession, user_id: UUID) -> int:
        query: Select = (
            select(func.count())
            .select_from(ActivationCode)
            .where(ActivationCode.used_by_user_id == user_id)
        )
        return (await db.execute(query)).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
activation_code_repository: ActivationCodeRepository = ActivationCodeRepository()
