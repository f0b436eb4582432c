"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for resolving the current user from a JWT or
an API key, and for enforcing per-endpoint permissions.

Authentication Flow:
    1. Authorization: Bearer <token> 헤더가 있으면 JWT로 인증
       (A Bearer token, when present, is decoded as an access JWT)
    2. 없으면 X-API-Key 헤더로 인증 (Otherwise the X-API-Key header is used)
    3. 사용자 존재 및 활성 상태 확인 (User must exist and be enabled)

Authorization Flow (require_permission):
    1. get_current_user로 사용자 인증 (User authenticated via get_current_user)
    2. 보유 역할 중 하나라도 권한을 부여하는지 확인
       (Any held role granting the permission is enough)
    3. 없으면 403 Forbidden 반환 (Returns 403 otherwise)
"""

from typing import Annotated, Callable, Awaitable
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.services.api_key_service import api_key_service
from app.utils.jwt import decode_token
from app.utils.permissions import Permission, has_permission

# 자격 증명 추출기 — 누락 시 401을 직접 처리하기 위해 auto_error=False
# (Credential extractors; missing credentials are handled below as 401)
bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)
api_key_scheme: APIKeyHeader = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def _user_from_token(db: AsyncSession, token: str) -> User | None:
    """액세스 토큰에서 사용자를 조회합니다.

    Raises:
        HTTPException(401): 토큰이 유효하지 않거나 만료됨 (Invalid or expired token)
    """
    try:
        payload: dict = decode_token(token)
        # 토큰 타입 검증 — Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise _unauthorized("Invalid token type")
        user_id: UUID = UUID(payload["sub"])
    except HTTPException:
        raise
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise _unauthorized("Invalid or expired token")

    return await user_repository.get_with_roles(db, user_id)


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    api_key: Annotated[str | None, Depends(api_key_scheme)],
) -> User:
    """현재 인증된 사용자를 반환합니다.

    Resolve the caller from a Bearer access token or an ``X-API-Key``
    header. The user comes back with role assignments loaded.

    Raises:
        HTTPException(401): 자격 증명 없음, 무효, 사용자 없음 또는 비활성
                            (Missing or invalid credentials, unknown or disabled user)
    """
    if credentials is not None:
        user: User | None = await _user_from_token(db, credentials.credentials)
    elif api_key:
        user = await api_key_service.authenticate(db, api_key)
        if user is None:
            raise _unauthorized("Invalid API key")
    else:
        raise _unauthorized("Not authenticated")

    if user is None:
        raise _unauthorized("User not found")
    if not user.enabled:
        raise _unauthorized("Account is disabled")
    return user


def require_permission(permission: Permission) -> Callable[..., Awaitable[User]]:
    """권한 기반 접근 제어 의존성 팩토리.

    Dependency factory that creates a FastAPI dependency enforcing that the
    caller holds ``permission`` through at least one of their roles.

    Args:
        permission: 필요한 권한 (Permission the endpoint needs)

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
        (FastAPI dependency function that returns User or raises 403)
    """
    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if not has_permission(current_user.role_names, permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user
    return _check
