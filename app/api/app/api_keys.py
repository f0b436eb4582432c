"""API 키 라우터 — 내 API 키 발급, 조회, 활성/비활성, 삭제.

API Key Router — Issue, list, toggle and revoke the caller's API keys.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.database import get_db
from app.models.user import User
from app.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyResponse, ApiKeyUpdate
from app.schemas.common import MessageResponse
from app.services.api_key_service import api_key_service
from app.utils.permissions import Permission

router: APIRouter = APIRouter()

require_manage_api_key = require_permission(Permission.MANAGE_API_KEY)


@router.get("/", response_model=list[ApiKeyResponse])
async def list_api_keys(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_api_key)],
) -> list[ApiKeyResponse]:
    return await api_key_service.list_keys(db, current_user)


@router.post("/", response_model=ApiKeyCreated, status_code=201)
async def create_api_key(
    data: ApiKeyCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_api_key)],
) -> ApiKeyCreated:
    """API 키 발급 — 평문 키는 이 응답에서만 확인 가능.

    Issue an API key. The plaintext key appears in this response only.
    """
    result: ApiKeyCreated = await api_key_service.create_key(db, current_user, data)
    await db.commit()
    return result


@router.patch("/{key_id}", response_model=ApiKeyResponse)
async def update_api_key(
    key_id: UUID,
    data: ApiKeyUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_api_key)],
) -> ApiKeyResponse:
    result: ApiKeyResponse = await api_key_service.set_enabled(db, current_user, key_id, data.enabled)
    await db.commit()
    return result


@router.delete("/{key_id}", response_model=MessageResponse)
async def delete_api_key(
    key_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_api_key)],
) -> dict[str, str | bool]:
    await api_key_service.delete_key(db, current_user, key_id)
    await db.commit()
    return {"success": True, "message": "API key deleted"}
