"""메일함 라우터 — 내 메일함, 메시지, 영구 메일함 엔드포인트.

Email Router — Own mailboxes, their messages and permanent mailbox
promotion. Fixed paths are declared before ``/{email_id}`` routes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.email import (
    AvailableForPermanentResponse,
    EmailCreate,
    EmailListResponse,
    EmailResponse,
    MessageDetail,
    MessageListResponse,
    PermanentEmailStatus,
    SetPermanentRequest,
    SetPermanentResponse,
)
from app.services.email_service import email_service
from app.utils.permissions import Permission

router: APIRouter = APIRouter()

require_manage_email = require_permission(Permission.MANAGE_EMAIL)
require_set_permanent = require_permission(Permission.SET_PERMANENT_EMAIL)


@router.get("/", response_model=EmailListResponse)
async def list_emails(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_email)],
    page: Annotated[int, Query(ge=1, description="페이지 번호")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="페이지 크기")] = 20,
) -> EmailListResponse:
    """내 미만료 메일함 목록 — Own unexpired mailboxes, newest first."""
    return await email_service.list_emails(db, current_user, page, limit)


@router.post("/", response_model=EmailResponse, status_code=201)
async def create_email(
    data: EmailCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(Permission.CREATE_EMAIL))],
) -> EmailResponse:
    """임시 메일함 발급.

    Issue a temporary mailbox with a chosen or random local part.
    """
    result: EmailResponse = await email_service.create_email(db, current_user, data)
    await db.commit()
    return result


@router.get("/set-permanent", response_model=PermanentEmailStatus)
async def get_permanent_status(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_set_permanent)],
) -> PermanentEmailStatus:
    return await email_service.get_permanent_status(db, current_user)


@router.post("/set-permanent", response_model=SetPermanentResponse)
async def set_permanent(
    data: SetPermanentRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_set_permanent)],
) -> SetPermanentResponse:
    """영구 메일함 지정 — 학생만, 한 개까지.

    Promote one of the caller's unexpired mailboxes to permanent.
    """
    result: SetPermanentResponse = await email_service.set_permanent(db, current_user, data.email_id)
    await db.commit()
    return result


@router.get("/available-for-permanent", response_model=AvailableForPermanentResponse)
async def available_for_permanent(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_set_permanent)],
) -> AvailableForPermanentResponse:
    """영구 지정 후보 목록 — Candidates, or the existing permanent mailbox."""
    return await email_service.available_for_permanent(db, current_user)


@router.delete("/{email_id}", response_model=MessageResponse)
async def delete_email(
    email_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_email)],
) -> dict[str, str | bool]:
    """내 메일함 삭제 — Messages are removed with the mailbox."""
    await email_service.delete_email(db, current_user, email_id)
    await db.commit()
    return {"success": True, "message": "Email deleted"}


@router.get("/{email_id}/messages", response_model=MessageListResponse)
async def list_messages(
    email_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_email)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> MessageListResponse:
    return await email_service.list_messages(db, current_user, email_id, page, limit)


@router.get("/{email_id}/messages/{message_id}", response_model=MessageDetail)
async def get_message(
    email_id: UUID,
    message_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_email)],
) -> MessageDetail:
    return await email_service.get_message(db, current_user, email_id, message_id)
