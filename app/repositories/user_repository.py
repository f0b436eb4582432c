"""사용자 레포지토리 — 사용자 조회, 필터링, 연관 데이터 정리 쿼리.

User Repository — Lookup, filtered listing and cascade cleanup queries for
users. Every loader eager-loads role assignments so ``User.role_names`` and
``User.primary_role`` are usable without lazy IO.
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.activation_code import ActivationCode
from app.models.api_key import ApiKey
from app.models.email import Email, Message
from app.models.token import RefreshToken
from app.models.user import Role, User, UserRole
from app.models.webhook import Webhook
from app.repositories.base import BaseRepository
from app.utils.pagination import paginate


def _with_roles(query: Select) -> Select:
    return query.options(
        selectinload(User.role_assignments).joinedload(UserRole.role)
    ).execution_options(populate_existing=True)


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(User)

    async def get_with_roles(self, db: AsyncSession, user_id: UUID) -> User | None:
        """역할 배정을 포함하여 사용자를 조회합니다.

        Retrieve a user with role assignments loaded.
        """
        result = await db.execute(_with_roles(select(User).where(User.id == user_id)))
        return result.scalar_one_or_none()

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        """사용자명으로 사용자를 조회합니다 — Exact username match."""
        result = await db.execute(_with_roles(select(User).where(User.username == username)))
        return result.scalar_one_or_none()

    async def get_detail(self, db: AsyncSession, user_id: UUID) -> User | None:
        """사용자 상세 조회 — Roles, mailboxes and redeemed codes loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User UUID)

        Returns:
            User | None: 연관 데이터가 로드된 사용자 또는 None
        """
        query: Select = _with_roles(select(User).where(User.id == user_id)).options(
            selectinload(User.emails),
            selectinload(User.activation_codes),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    def _filtered(
        self,
        search: str | None,
        status: str,
        role: str | None,
        username_only: bool = False,
    ) -> Select:
        """관리자 목록 필터 조건 — Filtered user query shared by list and summary."""
        query: Select = select(User)

        if role and role != "all":
            role_members = (
                select(UserRole.user_id)
                .join(Role, Role.id == UserRole.role_id)
                .where(Role.name == role)
            )
            query = query.where(User.id.in_(role_members))

        if search:
            # 와일드카드 문자는 그대로 검색 — % and _ match literally
            if username_only:
                query = query.where(User.username.icontains(search, autoescape=True))
            else:
                query = query.where(
                    or_(
                        User.username.icontains(search, autoescape=True),
                        User.name.icontains(search, autoescape=True),
                        User.email.icontains(search, autoescape=True),
                    )
                )

        if status == "enabled":
            query = query.where(User.enabled.is_(True))
        elif status == "disabled":
            query = query.where(User.enabled.is_(False))

        return query

    async def list_page(
        self,
        db: AsyncSession,
        search: str | None,
        status: str,
        role: str | None,
        page: int,
        limit: int,
    ) -> tuple[Sequence[User], int]:
        """필터된 사용자 목록 한 페이지 — One page of filtered users, newest first."""
        query: Select = (
            _with_roles(self._filtered(search, status, role))
            .options(selectinload(User.emails))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return await paginate(db, query, page, limit)

    async def list_all(
        self,
        db: AsyncSession,
        search: str | None,
        status: str,
        role: str | None,
        username_only: bool = False,
    ) -> list[User]:
        """필터된 사용자 전체 목록 — Every filtered user, newest first."""
        query: Select = (
            _with_roles(self._filtered(search, status, role, username_only))
            .options(selectinload(User.emails))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def summarize(
        self,
        db: AsyncSession,
        search: str | None,
        status: str,
        role: str | None,
    ) -> dict[str, Any]:
        """필터된 집합의 활성/비활성 수와 역할 분포.

        Enabled/disabled counts and per-role holder counts over the filtered set.
        """
        filtered_ids = self._filtered(search, status, role).with_only_columns(User.id).scalar_subquery()

        enabled_rows = await db.execute(
            select(User.enabled, func.count())
            .where(User.id.in_(filtered_ids))
            .group_by(User.enabled)
        )
        counts: dict[bool, int] = {bool(enabled): count for enabled, count in enabled_rows.all()}

        role_rows = await db.execute(
            select(Role.name, func.count(func.distinct(UserRole.user_id)))
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id.in_(filtered_ids))
            .group_by(Role.name)
        )
        return {
            "enabled": counts.get(True, 0),
            "disabled": counts.get(False, 0),
            "roles": {name: count for name, count in role_rows.all()},
        }

    async def set_roles(self, db: AsyncSession, user: User, role: Role) -> None:
        """사용자의 역할을 단일 역할로 교체합니다.

        Replace every role assignment of ``user`` with ``role``. An existing
        assignment to the same role is kept as is.
        """
        kept: list[UserRole] = [a for a in user.role_assignments if a.role_id == role.id]
        user.role_assignments = kept or [UserRole(role=role)]
        await db.flush()

    async def purge(self, db: AsyncSession, user_id: UUID) -> None:
        """사용자와 모든 연관 데이터를 삭제합니다.

        Remove a user together with everything hanging off it. Redeemed
        activation codes are detached, not deleted. Runs inside the caller's
        transaction.
        """
        no_sync: dict[str, Any] = {"synchronize_session": False}
        email_ids = select(Email.id).where(Email.user_id == user_id).scalar_subquery()

        await db.execute(
            update(ActivationCode)
            .where(ActivationCode.used_by_user_id == user_id)
            .values(used_by_user_id=None)
            .execution_options(**no_sync)
        )
        await db.execute(delete(Message).where(Message.email_id.in_(email_ids)).execution_options(**no_sync))
        await db.execute(delete(Email).where(Email.user_id == user_id).execution_options(**no_sync))
        await db.execute(delete(ApiKey).where(ApiKey.user_id == user_id).execution_options(**no_sync))
        await db.execute(delete(Webhook).where(Webhook.user_id == user_id).execution_options(**no_sync))
        await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id).execution_options(**no_sync))
        await db.execute(delete(UserRole).where(UserRole.user_id == user_id).execution_options(**no_sync))
        await db.execute(delete(User).where(User.id == user_id).execution_options(**no_sync))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
