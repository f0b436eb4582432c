"""API 키 서비스 — 키 발급, 관리, 인증.

API Key Service — Issue, list, toggle and revoke the caller's API keys, and
resolve an ``X-API-Key`` header to its owner.
"""

from datetime import timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.api_key import ApiKey
from app.models.user import User
from app.repositories.api_key_repository import api_key_repository
from app.repositories.user_repository import user_repository
from app.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyResponse
from app.utils.exceptions import DuplicateError, NotFoundError
from app.utils.generators import API_KEY_PREFIX_LENGTH, generate_api_key
from app.utils.password import hash_password, verify_password

logger = structlog.get_logger()


def _to_response(api_key: ApiKey) -> ApiKeyResponse:
    return ApiKeyResponse(
        id=str(api_key.id),
        name=api_key.name,
        key_prefix=api_key.key_prefix,
        enabled=api_key.enabled,
        created_at=api_key.created_at,
        expires_at=api_key.expires_at,
    )


class ApiKeyService:
    """API 키 비즈니스 로직을 처리하는 서비스."""

    async def list_keys(self, db: AsyncSession, user: User) -> list[ApiKeyResponse]:
        keys: list[ApiKey] = await api_key_repository.list_for_user(db, user.id)
        return [_to_response(k) for k in keys]

    async def create_key(self, db: AsyncSession, user: User, data: ApiKeyCreate) -> ApiKeyCreated:
        """새 API 키를 발급합니다.

        Issue a key for the caller. The plaintext key is returned here once
        and never stored.

        Raises:
            DuplicateError: 같은 이름의 키 존재 (Name already used by the caller)
        """
        if await api_key_repository.get_by_name(db, user.id, data.name) is not None:
            raise DuplicateError("An API key with this name already exists")

        plaintext, prefix = generate_api_key()
        now = utcnow()
        api_key: ApiKey = await api_key_repository.create(db, {
            "user_id": user.id,
            "name": data.name,
            "key_prefix": prefix,
            "key_hash": hash_password(plaintext),
            "enabled": True,
            "created_at": now,
            "expires_at": now + timedelta(days=data.expires_in_days) if data.expires_in_days else None,
        })
        logger.info("api_key_created", user_id=str(user.id), key_id=str(api_key.id))
        return ApiKeyCreated(**_to_response(api_key).model_dump(), key=plaintext)

    async def _get_owned(self, db: AsyncSession, user: User, key_id: UUID) -> ApiKey:
        api_key: ApiKey | None = await api_key_repository.get_by_id(db, key_id, user_id=user.id)
        if api_key is None:
            raise NotFoundError("API key not found")
        return api_key

    async def set_enabled(
        self,
        db: AsyncSession,
        user: User,
        key_id: UUID,
        enabled: bool,
    ) -> ApiKeyResponse:
        api_key: ApiKey = await self._get_owned(db, user, key_id)
        await api_key_repository.update(db, api_key, {"enabled": enabled})
        return _to_response(api_key)

    async def delete_key(self, db: AsyncSession, user: User, key_id: UUID) -> None:
        api_key: ApiKey = await self._get_owned(db, user, key_id)
        await api_key_repository.delete(db, api_key)
        logger.info("api_key_deleted", user_id=str(user.id), key_id=str(key_id))

    async def authenticate(self, db: AsyncSession, plaintext: str) -> User | None:
        """평문 키로 소유자를 찾습니다.

        Resolve a plaintext key to its owner. Disabled or expired keys, and
        keys whose hash does not match, resolve to None.
        """
        if len(plaintext) < API_KEY_PREFIX_LENGTH:
            return None

        now = utcnow()
        candidates: list[ApiKey] = await api_key_repository.find_by_prefix(
            db, plaintext[:API_KEY_PREFIX_LENGTH]
        )
        for api_key in candidates:
            if api_key.expires_at is not None and api_key.expires_at <= now:
                continue
            if verify_password(plaintext, api_key.key_hash):
                return await user_repository.get_with_roles(db, api_key.user_id)
        return None


# 싱글턴 인스턴스 — Singleton instance
api_key_service: ApiKeyService = ApiKeyService()
