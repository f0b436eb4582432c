"""관리자 학생 라우터 — 학생 계정 조회, 상태 변경, 메일함 관리.

Admin Student Router — The user console restricted to student accounts.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.database import get_db
from app.models.user import User
from app.schemas.email import AdminEmailCreate, AdminEmailResult, UserEmailsResponse
from app.schemas.user import (
    AdminUserDetail,
    StudentListResponse,
    UserStatusResponse,
    UserStatusUpdate,
)
from app.services.student_service import student_service
from app.utils.permissions import Permission

router: APIRouter = APIRouter()

require_manage_students = require_permission(Permission.MANAGE_STUDENTS)


@router.get("/", response_model=StudentListResponse)
async def list_students(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
    search: Annotated[str | None, Query(description="username 검색")] = None,
    status: Annotated[Literal["all", "enabled", "disabled"], Query(description="활성 상태 필터")] = "all",
) -> StudentListResponse:
    """학생 목록 — Students, newest first."""
    return await student_service.list_students(db, search, status)


@router.get("/{user_id}", response_model=AdminUserDetail)
async def get_student(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> AdminUserDetail:
    return await student_service.get_student(db, user_id)


@router.put("/{user_id}", response_model=UserStatusResponse)
async def update_student_status(
    user_id: UUID,
    data: UserStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> UserStatusResponse:
    result: UserStatusResponse = await student_service.set_status(db, user_id, data.enabled)
    await db.commit()
    return result


@router.get("/{user_id}/emails", response_model=UserEmailsResponse)
async def list_student_emails(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> UserEmailsResponse:
    return await student_service.list_emails(db, user_id)


@router.post("/{user_id}/emails", response_model=AdminEmailResult, status_code=201)
async def add_student_email(
    user_id: UUID,
    data: AdminEmailCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_students)],
) -> AdminEmailResult:
    """학생에게 메일함 추가 — Student must be enabled."""
    result: AdminEmailResult = await student_service.add_email(db, user_id, data)
    await db.commit()
    return result
