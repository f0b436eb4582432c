"""API 키 Pydantic 요청/응답 스키마 정의.

API key Pydantic request/response schemas. The plaintext key only ever
appears in ApiKeyCreated, returned once at creation time.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ApiKeyCreate(BaseModel):
    """API 키 생성 요청.

    Attributes:
        name: 키 이름, 사용자 내 고유 (Label, unique per user)
        expires_in_days: 유효 일수, 생략 시 무기한 (Days until expiry; None = never)
    """

    name: str = Field(min_length=1, max_length=100)
    expires_in_days: int | None = Field(default=None, ge=1, le=3650)


class ApiKeyUpdate(BaseModel):
    """API 키 활성/비활성 요청."""

    enabled: bool


class ApiKeyResponse(BaseModel):
    """API 키 응답 스키마 (평문 키 제외)."""

    id: str
    name: str
    key_prefix: str
    enabled: bool
    created_at: datetime
    expires_at: datetime | None


class ApiKeyCreated(ApiKeyResponse):
    """API 키 생성 결과 — Includes the plaintext key, shown only once."""

    key: str
