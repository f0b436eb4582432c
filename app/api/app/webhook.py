"""웹훅 설정 라우터.

Webhook Router — Read and save the caller's webhook config.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.database import get_db
from app.models.user import User
from app.schemas.webhook import WebhookResponse, WebhookUpdate
from app.services.webhook_service import webhook_service
from app.utils.permissions import Permission

router: APIRouter = APIRouter()

require_manage_webhook = require_permission(Permission.MANAGE_WEBHOOK)


@router.get("/", response_model=WebhookResponse)
async def get_webhook(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_webhook)],
) -> WebhookResponse:
    return await webhook_service.get_config(db, current_user)


@router.post("/", response_model=WebhookResponse)
async def save_webhook(
    data: WebhookUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_webhook)],
) -> WebhookResponse:
    """웹훅 저장 — 사용자당 한 개, 있으면 덮어쓰기.

    Save the caller's single webhook, replacing an existing one.
    """
    result: WebhookResponse = await webhook_service.save_config(db, current_user, data)
    await db.commit()
    return result
