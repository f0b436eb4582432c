"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필, 활성화 코드 사용.

Auth Router — Registration, login, token refresh, logout, profile and
activation code redemption endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    ActivateRequest,
    ActivateResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from app.services.activation_service import activation_service
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """자가 회원가입 — 기본 역할로 계정 생성.

    Self-registration. The new account holds the default role.
    """
    result: TokenResponse = await auth_service.register(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — Username and password sign-in."""
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃 — 리프레시 토큰 폐기.

    Logout endpoint. Revokes the given refresh token.
    """
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자 프로필 조회.

    Get the profile of the currently authenticated user.
    """
    return auth_service.get_me(current_user)


@router.post("/activate", response_model=ActivateResponse, status_code=201)
async def activate(
    data: ActivateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ActivateResponse:
    """활성화 코드 사용 — 학생 계정과 영구 메일함을 한 번에 생성.

    Redeem an activation code into a student account with a permanent
    mailbox. Nothing is committed unless every step succeeds.
    """
    result: ActivateResponse = await activation_service.activate(db, data)
    await db.commit()
    return result
