"""관리자 사용자 관리 서비스.

Admin User Service — Listing, detail, enable/disable, role changes and full
deletion of user accounts, plus the per-user mailbox console. The student
console reuses these operations through StudentService.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.user import Role, User
from app.repositories.activation_code_repository import activation_code_repository
from app.repositories.api_key_repository import api_key_repository
from app.repositories.auth_repository import auth_repository
from app.repositories.email_repository import email_repository
from app.repositories.role_repository import role_repository
from app.repositories.user_repository import user_repository
from app.repositories.webhook_repository import webhook_repository
from app.schemas.email import (
    AdminEmailCreate,
    AdminEmailResult,
    AdminEmailUpdate,
    UserEmailsResponse,
)
from app.schemas.user import (
    AdminUserDetail,
    AdminUserListResponse,
    AdminUserResponse,
    DeletedCounts,
    RedeemedCode,
    RoleDistribution,
    RoleInfo,
    UserBrief,
    UserDeleteResponse,
    UserRoleResponse,
    UserRoleUpdate,
    UserStatusResponse,
    UserSummary,
)
from app.services.email_service import email_service, to_email_response
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.pagination import PaginationMeta
from app.utils.permissions import Role as RoleName

logger = structlog.get_logger()


def to_admin_user_response(user: User) -> AdminUserResponse:
    """역할과 메일함이 로드된 User를 관리자 응답으로 변환합니다.

    Convert a User with role assignments and mailboxes loaded.
    """
    now = utcnow()
    emails = list(user.emails)
    return AdminUserResponse(
        id=str(user.id),
        username=user.username,
        name=user.name,
        email=user.email,
        enabled=user.enabled,
        roles=[
            RoleInfo(id=str(a.role.id), name=a.role.name, description=a.role.description)
            for a in user.role_assignments
        ],
        primary_role=user.primary_role,
        emails=[to_email_response(e, now) for e in emails],
        email_count=len(emails),
        permanent_email_count=sum(1 for e in emails if e.is_permanent),
        active_email_count=sum(1 for e in emails if not e.is_expired(now)),
    )


class UserService:
    """관리자 사용자 관리 비즈니스 로직을 처리하는 서비스."""

    async def get_target(self, db: AsyncSession, user_id: UUID) -> User:
        """대상 사용자 조회, 없으면 404 — Load a target user with roles and mailboxes.

        Raises:
            NotFoundError: 사용자 없음 (User not found)
        """
        user: User | None = await user_repository.get_detail(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self,
        db: AsyncSession,
        search: str | None,
        status: str,
        role: str | None,
        page: int,
        limit: int,
    ) -> AdminUserListResponse:
        """사용자 목록, 페이지네이션 및 요약 포함.

        Filtered page of users with a summary over the whole filtered set.

        Args:
            search: username, name, email 부분 일치 (Case-insensitive substring)
            status: all | enabled | disabled
            role: all 또는 역할 이름 (all or a role name)
            page: 페이지 번호 (1-based page)
            limit: 페이지 크기 (Page size)
        """
        users, total = await user_repository.list_page(db, search, status, role, page, limit)
        summary: dict = await user_repository.summarize(db, search, status, role)
        return AdminUserListResponse(
            users=[to_admin_user_response(u) for u in users],
            pagination=PaginationMeta.build(page, limit, total),
            summary=UserSummary(
                total_users=total,
                enabled_users=summary["enabled"],
                disabled_users=summary["disabled"],
                role_distribution=RoleDistribution(**summary["roles"]),
            ),
        )

    async def get_user(self, db: AsyncSession, user_id: UUID) -> AdminUserDetail:
        """사용자 상세, 사용한 활성화 코드 포함 — Detail with the redeemed code."""
        user: User = await self.get_target(db, user_id)
        codes = list(user.activation_codes)
        redeemed = codes[0] if codes else None
        return AdminUserDetail(
            **to_admin_user_response(user).model_dump(),
            activation_code=RedeemedCode(
                id=str(redeemed.id),
                code=redeemed.code,
                status=redeemed.status,
                used_at=redeemed.used_at,
            ) if redeemed else None,
        )

    async def set_status(self, db: AsyncSession, user: User, enabled: bool) -> UserStatusResponse:
        """계정 활성/비활성 — The emperor can never be disabled.

        Raises:
            BadRequestError: 황제 비활성화 시도 (Disabling the emperor)
        """
        if not enabled and RoleName.EMPEROR.value in user.role_names:
            raise BadRequestError("The emperor account cannot be disabled")

        await user_repository.update(db, user, {"enabled": enabled})
        logger.info("user_status_changed", user_id=str(user.id), enabled=enabled)
        return UserStatusResponse(
            message=f"User {'enabled' if enabled else 'disabled'}",
            user=UserBrief(id=str(user.id), username=user.username, name=user.name, enabled=user.enabled),
        )

    async def change_role(
        self,
        db: AsyncSession,
        actor: User,
        user_id: UUID,
        data: UserRoleUpdate,
    ) -> UserRoleResponse:
        """사용자의 역할을 교체합니다.

        Replace every role assignment of the target with ``data.role``.

        Raises:
            NotFoundError: 사용자 없음
            BadRequestError: 황제 대상 또는 자기 자신 변경 (Emperor target or self)
        """
        user: User = await self.get_target(db, user_id)
        if RoleName.EMPEROR.value in user.role_names:
            raise BadRequestError("The emperor's role cannot be changed")
        if user.id == actor.id:
            raise BadRequestError("You cannot change your own role")

        role: Role = await role_repository.get_or_create(db, data.role)
        await user_repository.set_roles(db, user, role)

        user = await self.get_target(db, user_id)
        logger.info("user_role_changed", user_id=str(user.id), role=data.role, by=str(actor.id))
        return UserRoleResponse(
            message=f"Role changed to {data.role}",
            user=to_admin_user_response(user),
        )

    async def delete_user(self, db: AsyncSession, user_id: UUID) -> UserDeleteResponse:
        """사용자와 모든 연관 데이터를 삭제합니다.

        Delete a user and everything it owns in the caller's transaction.
        Redeemed activation codes are detached and kept.

        Raises:
            NotFoundError: 사용자 없음
            BadRequestError: 황제 삭제 시도 (Deleting the emperor)
        """
        user: User = await self.get_target(db, user_id)
        if RoleName.EMPEROR.value in user.role_names:
            raise BadRequestError("The emperor account cannot be deleted")

        counts = DeletedCounts(
            emails=await email_repository.count_for_user(db, user.id),
            api_keys=await api_key_repository.count_for_user(db, user.id),
            activation_codes=await activation_code_repository.count_redeemed_by(db, user.id),
            user_roles=await role_repository.count_assignments(db, user.id),
            webhooks=await webhook_repository.count_for_user(db, user.id),
            refresh_tokens=await auth_repository.count_user_refresh_tokens(db, user.id),
        )
        username: str = user.username
        db.expunge(user)
        await user_repository.purge(db, user_id)

        logger.info("user_deleted", user_id=str(user_id), username=username, **counts.model_dump())
        return UserDeleteResponse(message=f"User {username} deleted", deleted_data=counts)

    # === 사용자 메일함 콘솔 (Per-user mailbox console) ===

    async def list_user_emails(self, db: AsyncSession, user: User) -> UserEmailsResponse:
        return await email_service.user_emails_overview(db, user)

    async def add_user_email(
        self,
        db: AsyncSession,
        user: User,
        data: AdminEmailCreate,
    ) -> AdminEmailResult:
        return await email_service.admin_add_email(db, user, data)

    async def update_user_email(
        self,
        db: AsyncSession,
        user: User,
        email_id: UUID,
        data: AdminEmailUpdate,
    ) -> AdminEmailResult:
        return await email_service.admin_update_email(db, user, email_id, data)

    async def delete_user_email(self, db: AsyncSession, user: User, email_id: UUID) -> str:
        return await email_service.admin_delete_email(db, user, email_id)


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
