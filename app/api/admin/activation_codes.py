"""관리자 활성화 코드 라우터.

Admin Activation Code Router — List, generate, inspect, change status and
delete activation codes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.database import get_db
from app.models.user import User
from app.schemas.activation_code import (
    ActivationCodeBatchResponse,
    ActivationCodeCreate,
    ActivationCodeListResponse,
    ActivationCodeResponse,
    ActivationCodeResult,
    ActivationCodeStatusUpdate,
)
from app.schemas.common import MessageResponse
from app.services.activation_code_service import activation_code_service
from app.utils.permissions import Permission

router: APIRouter = APIRouter()

require_manage_config = require_permission(Permission.MANAGE_CONFIG)


@router.get("/", response_model=ActivationCodeListResponse)
async def list_activation_codes(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_config)],
    status: Annotated[str | None, Query(description="상태 필터 unused/used/expired/disabled")] = None,
    search: Annotated[str | None, Query(description="코드 검색")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ActivationCodeListResponse:
    """활성화 코드 목록 — 필터된 페이지와 전체 상태별 통계.

    Filtered page of codes, newest first, with stats over every code.
    """
    return await activation_code_service.list_codes(db, status, search, page, per_page)


@router.post("/", response_model=ActivationCodeBatchResponse, status_code=201)
async def generate_activation_codes(
    data: ActivationCodeCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_config)],
) -> ActivationCodeBatchResponse:
    result: ActivationCodeBatchResponse = await activation_code_service.generate(db, data)
    await db.commit()
    return result


@router.get("/{code_id}", response_model=ActivationCodeResponse)
async def get_activation_code(
    code_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_config)],
) -> ActivationCodeResponse:
    return await activation_code_service.get_code(db, code_id)


@router.put("/{code_id}", response_model=ActivationCodeResult)
async def update_activation_code(
    code_id: UUID,
    data: ActivationCodeStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_config)],
) -> ActivationCodeResult:
    """상태 변경 — A used code may only be disabled."""
    result: ActivationCodeResult = await activation_code_service.update_status(db, code_id, data.status)
    await db.commit()
    return result


@router.delete("/{code_id}", response_model=MessageResponse)
async def delete_activation_code(
    code_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_config)],
) -> dict[str, str | bool]:
    await activation_code_service.delete_code(db, code_id)
    await db.commit()
    return {"success": True, "message": "Activation code deleted"}
