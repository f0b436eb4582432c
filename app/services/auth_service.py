"""인증 서비스 — 회원가입, 로그인, 토큰 갱신, 프로필 비즈니스 로직.

Auth Service — Business logic for registration, login, token refresh and
the current user profile.
"""

from datetime import datetime, timedelta, timezone

import jwt
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.token import RefreshToken
from app.models.user import Role, User
from app.repositories.auth_repository import auth_repository
from app.repositories.role_repository import role_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from app.utils.exceptions import DuplicateError, UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import hash_password, verify_password
from app.utils.permissions import permissions_for

logger = structlog.get_logger()


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages registration, login, token rotation and logout.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str | list[str]]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT payload from the user and their role names.
        """
        return {
            "sub": str(user.id),
            "username": user.username,
            "roles": user.role_names,
        }

    async def generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token.
        Earlier refresh tokens of the user are revoked.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 역할이 로드된 사용자 (User with role assignments loaded)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)
        """
        payload = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 기존 리프레시 토큰 정리 — Clean up old refresh tokens to prevent accumulation
        await auth_repository.delete_user_refresh_tokens(db, user.id)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> TokenResponse:
        """자가 가입을 처리합니다.

        Create an account holding DEFAULT_ROLE and sign it in.

        Raises:
            DuplicateError: 사용자명 중복 (Username already taken)
        """
        if await user_repository.get_by_username(db, data.username) is not None:
            raise DuplicateError("Username already exists")

        user: User = await user_repository.create(db, {
            "username": data.username,
            "password_hash": hash_password(data.password),
        })
        role: Role = await role_repository.get_or_create(db, settings.DEFAULT_ROLE)
        await role_repository.assign(db, user.id, role)

        user = await user_repository.get_with_roles(db, user.id)
        logger.info("user_registered", user_id=str(user.id), username=user.username, role=role.name)
        return await self.generate_tokens(db, user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials or disabled account)
        """
        user: User | None = await user_repository.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")

        if not user.enabled:
            raise UnauthorizedError("Account is disabled")

        return await self.generate_tokens(db, user)

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Exchange a stored, unexpired refresh token for a new pair. The old
        refresh token is revoked.

        Raises:
            UnauthorizedError: 무효/만료 토큰, 또는 비활성 계정
        """
        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid or expired refresh token")

        if payload.get("type") != "refresh":
            raise UnauthorizedError("Invalid token type")

        stored: RefreshToken | None = await auth_repository.get_refresh_token(db, data.refresh_token)
        if stored is None or stored.expires_at < datetime.now(timezone.utc):
            raise UnauthorizedError("Refresh token has been revoked")

        user: User | None = await user_repository.get_with_roles(db, stored.user_id)
        if user is None or not user.enabled:
            raise UnauthorizedError("User not found or disabled")

        return await self.generate_tokens(db, user)

    async def logout(self, db: AsyncSession, refresh_token: str) -> None:
        """리프레시 토큰을 폐기합니다 — Unknown tokens are ignored."""
        await auth_repository.delete_refresh_token(db, refresh_token)

    def get_me(self, user: User) -> UserMeResponse:
        """현재 사용자 프로필 — Profile with roles and sorted permission codes."""
        role_names: list[str] = user.role_names
        return UserMeResponse(
            id=str(user.id),
            username=user.username,
            name=user.name,
            email=user.email,
            enabled=user.enabled,
            roles=role_names,
            primary_role=user.primary_role,
            permissions=sorted(p.value for p in permissions_for(role_names)),
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
