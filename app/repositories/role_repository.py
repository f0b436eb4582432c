"""역할 레포지토리 — 역할 조회, 지연 생성, 배정 쿼리.

Role Repository — Role lookup, lazy creation and assignment queries.
Role rows are created the first time a role name is assigned.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role, UserRole
from app.repositories.base import BaseRepository
from app.utils.permissions import ROLE_DESCRIPTIONS, Role as RoleName


class RoleRepository(BaseRepository[Role]):
    """역할 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Role)

    async def get_by_name(self, db: AsyncSession, name: str) -> Role | None:
        """이름으로 역할을 조회합니다 — Look up a role row by name."""
        query: Select = select(Role).where(Role.name == name)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_or_create(self, db: AsyncSession, name: str) -> Role:
        """역할을 조회하고, 없으면 생성합니다.

        Return the role row for ``name``, creating it with its standard
        description when absent.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            name: 역할 이름 (Role name)

        Returns:
            Role: 기존 또는 새로 생성된 역할 (Existing or newly created role)
        """
        role: Role | None = await self.get_by_name(db, name)
        if role is not None:
            return role
        return await self.create(db, {
            "name": name,
            "description": ROLE_DESCRIPTIONS.get(RoleName(name)),
        })

    async def assign(self, db: AsyncSession, user_id: UUID, role: Role) -> UserRole:
        """사용자에게 역할을 배정합니다 — Add one role assignment."""
        assignment: UserRole = UserRole(user_id=user_id, role_id=role.id)
        db.add(assignment)
        await db.flush()
        return assignment

    async def count_assignments(self, db: AsyncSession, user_id: UUID) -> int:
        query: Select = select(func.count()).select_from(UserRole).where(UserRole.user_id == user_id)
        return (await db.execute(query)).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
role_repository: RoleRepository = RoleRepository()
