"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token refresh, current user info and
activation code redemption.
"""

from pydantic import BaseModel, Field

# 사용자명 규칙 — 1~20자, 영문/숫자/밑줄/하이픈 (Username rule)
USERNAME_PATTERN: str = r"^[A-Za-z0-9_-]{1,20}$"


class RegisterRequest(BaseModel):
    """자가 가입 요청 스키마.

    Self-registration request schema. New accounts receive DEFAULT_ROLE.

    Attributes:
        username: 로그인 아이디 (1-20 chars of [A-Za-z0-9_-])
        password: 비밀번호 (Plain text, at least 8 chars, bcrypt-hashed on server)
    """

    username: str = Field(pattern=USERNAME_PATTERN)
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    """로그인 요청 스키마."""

    username: str  # 로그인 아이디 (Login identifier)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Compared to bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login, registration, activation or refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마."""

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Attributes:
        id: 사용자 UUID (User unique identifier)
        username: 로그인 아이디 (Login username)
        name: 표시 이름 (Display name, nullable)
        email: 연락처 이메일 (Contact email, nullable)
        enabled: 활성 상태 (Account enabled flag)
        roles: 역할 이름 목록 (Assigned role names, oldest first)
        primary_role: 대표 역할 (First assigned role or civilian)
        permissions: 권한 코드, 정렬됨 (Sorted permission codes)
    """

    id: str
    username: str
    name: str | None
    email: str | None
    enabled: bool
    roles: list[str]
    primary_role: str
    permissions: list[str] = []


class ActivateRequest(BaseModel):
    """활성화 코드 사용 요청 스키마.

    Redeem an activation code: creates a student account together with the
    permanent mailbox ``<permanent_email>@<first configured domain>``.
    """

    activation_code: str = Field(min_length=1)
    username: str = Field(pattern=USERNAME_PATTERN)
    password: str = Field(min_length=8, max_length=128)
    permanent_email: str = Field(min_length=1)


class ActivatedUser(BaseModel):
    """활성화로 생성된 사용자 요약."""

    id: str
    username: str


class ActivatedEmail(BaseModel):
    """활성화로 생성된 영구 메일함 요약."""

    id: str
    address: str


class ActivateResponse(BaseModel):
    """활성화 결과 응답 스키마 — Created account, mailbox and a token pair."""

    success: bool = True
    message: str
    user: ActivatedUser
    permanent_email: ActivatedEmail
    tokens: TokenResponse
