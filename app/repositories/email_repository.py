"""메일함 레포지토리 — 메일함과 수신 메시지 쿼리.

Email Repository — Mailbox and received-message queries.
"""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.email import Email, Message
from app.repositories.base import BaseRepository
from app.utils.pagination import paginate


class EmailRepository(BaseRepository[Email]):
    """메일함 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Email)

    async def get_by_address(self, db: AsyncSession, address: str) -> Email | None:
        """주소로 메일함 조회 — Case-insensitive address lookup."""
        query: Select = select(Email).where(Email.address == address.lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_owned(self, db: AsyncSession, email_id: UUID, user_id: UUID) -> Email | None:
        """소유자 범위로 메일함 조회 — None when missing or owned by someone else."""
        return await self.get_by_id(db, email_id, user_id=user_id)

    async def get_permanent(self, db: AsyncSession, user_id: UUID) -> Email | None:
        """사용자의 영구 메일함 — The user's permanent mailbox, if any."""
        query: Select = (
            select(Email)
            .where(Email.user_id == user_id, Email.is_permanent.is_(True))
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_active_page(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int,
        limit: int,
    ) -> tuple[Sequence[Email], int]:
        """미만료 메일함 한 페이지, 최신순 — One page of unexpired mailboxes."""
        query: Select = (
            select(Email)
            .where(Email.user_id == user_id, Email.expires_at > utcnow())
            .order_by(Email.created_at.desc(), Email.id.desc())
        )
        return await paginate(db, query, page, limit)

    async def count_active(self, db: AsyncSession, user_id: UUID, now: datetime | None = None) -> int:
        """미만료 메일함 수 — Unexpired mailboxes held by the user."""
        query: Select = (
            select(func.count())
            .select_from(Email)
            .where(Email.user_id == user_id, Email.expires_at > (now or utcnow()))
        )
        return (await db.execute(query)).scalar() or 0

    async def list_available_for_permanent(self, db: AsyncSession, user_id: UUID) -> list[Email]:
        """영구 지정 후보 — Unexpired temporary mailboxes, newest first."""
        query: Select = (
            select(Email)
            .where(
                Email.user_id == user_id,
                Email.is_permanent.is_(False),
                Email.expires_at > utcnow(),
            )
            .order_by(Email.created_at.desc(), Email.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_for_user(self, db: AsyncSession, user_id: UUID) -> list[Email]:
        """사용자의 전체 메일함, 만료 포함 — Every mailbox of the user, newest first."""
        query: Select = (
            select(Email)
            .where(Email.user_id == user_id)
            .order_by(Email.created_at.desc(), Email.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_for_user(self, db: AsyncSession, user_id: UUID) -> int:
        query: Select = select(func.count()).select_from(Email).where(Email.user_id == user_id)
        return (await db.execute(query)).scalar() or 0

    # === 메시지 (Message) ===

    async def list_messages_page(
        self,
        db: AsyncSession,
        email_id: UUID,
        page: int,
        limit: int,
    ) -> tuple[Sequence[Message], int]:
        """메시지 한 페이지, 최신순 — One page of messages, newest first."""
        query: Select = (
            select(Message)
            .where(Message.email_id == email_id)
            .order_by(Message.received_at.desc(), Message.id.desc())
        )
        return await paginate(db, query, page, limit)

    async def get_message(self, db: AsyncSession, email_id: UUID, message_id: UUID) -> Message | None:
        """메일함 범위로 메시지 조회 — Message scoped to its mailbox."""
        query: Select = select(Message).where(Message.id == message_id, Message.email_id == email_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
email_repository: EmailRepository = EmailRepository()
