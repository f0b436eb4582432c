"""관리자 사용자 라우터 — 사용자 조회, 상태/역할 변경, 삭제, 메일함 관리.

Admin User Router — User listing with filters and summary, detail, enable
toggle, role change, full deletion and the per-user mailbox console.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.email import (
    AdminEmailCreate,
    AdminEmailResult,
    AdminEmailUpdate,
    UserEmailsResponse,
)
from app.schemas.user import (
    AdminUserDetail,
    AdminUserListResponse,
    UserDeleteResponse,
    UserRoleResponse,
    UserRoleUpdate,
    UserStatusResponse,
    UserStatusUpdate,
)
from app.services.user_service import user_service
from app.utils.permissions import Permission

router: APIRouter = APIRouter()

require_manage_students = require_permission(Permission.MANAGE_STUDENTS)


@router.get("/", response_model=AdminUserListResponse)
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
    search: Annotated[str | None, Query(description="username/name/email 검색")] = None,
    status: Annotated[Literal["all", "enabled", "disabled"], Query(description="활성 상태 필터")] = "all",
    role: Annotated[
        Literal["all", "emperor", "duke", "knight", "student", "civilian"],
        Query(description="역할 필터"),
    ] = "all",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> AdminUserListResponse:
    """사용자 목록을 필터 조건으로 조회합니다.

    List users filtered by search text, status and role, with a summary
    over the whole filtered set.
    """
    return await user_service.list_users(db, search, status, role, page, limit)


@router.get("/{user_id}", response_model=AdminUserDetail)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> AdminUserDetail:
    """사용자 상세 — Detail including the redeemed activation code."""
    return await user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserStatusResponse)
async def update_user_status(
    user_id: UUID,
    data: UserStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> UserStatusResponse:
    """계정 활성/비활성 — The emperor cannot be disabled."""
    user: User = await user_service.get_target(db, user_id)
    result: UserStatusResponse = await user_service.set_status(db, user, data.enabled)
    await db.commit()
    return result


@router.put("/{user_id}/role", response_model=UserRoleResponse)
async def change_user_role(
    user_id: UUID,
    data: UserRoleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(Permission.PROMOTE_USER))],
) -> UserRoleResponse:
    """역할 변경 — 모든 기존 역할을 새 역할 하나로 교체.

    Replace the target's roles with one of duke, knight or civilian.
    """
    result: UserRoleResponse = await user_service.change_role(db, current_user, user_id, data)
    await db.commit()
    return result


@router.delete("/{user_id}", response_model=UserDeleteResponse)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> UserDeleteResponse:
    """사용자 삭제 — 연관 데이터를 한 트랜잭션에서 정리.

    Delete a user and its data in one transaction. Returns deleted counts.
    """
    result: UserDeleteResponse = await user_service.delete_user(db, user_id)
    await db.commit()
    return result


@router.get("/{user_id}/emails", response_model=UserEmailsResponse)
async def list_user_emails(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> UserEmailsResponse:
    user: User = await user_service.get_target(db, user_id)
    return await user_service.list_user_emails(db, user)


@router.post("/{user_id}/emails", response_model=AdminEmailResult, status_code=201)
async def add_user_email(
    user_id: UUID,
    data: AdminEmailCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> AdminEmailResult:
    """사용자에게 메일함 추가 — Temporary or permanent mailbox for the user."""
    user: User = await user_service.get_target(db, user_id)
    result: AdminEmailResult = await user_service.add_user_email(db, user, data)
    await db.commit()
    return result


@router.put("/{user_id}/emails/{email_id}", response_model=AdminEmailResult)
async def update_user_email(
    user_id: UUID,
    email_id: UUID,
    data: AdminEmailUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> AdminEmailResult:
    user: User = await user_service.get_target(db, user_id)
    result: AdminEmailResult = await user_service.update_user_email(db, user, email_id, data)
    await db.commit()
    return result


@router.delete("/{user_id}/emails/{email_id}", response_model=MessageResponse)
async def delete_user_email(
    user_id: UUID,
    email_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> dict[str, str | bool]:
    user: User = await user_service.get_target(db, user_id)
    address: str = await user_service.delete_user_email(db, user, email_id)
    await db.commit()
    return {"success": True, "message": f"Deleted {address}"}
