"""활성화 코드 관리 Pydantic 요청/응답 스키마 정의.

Activation code administration Pydantic request/response schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ActivationCodeStatus = Literal["unused", "used", "expired", "disabled"]


class ActivationCodeCreate(BaseModel):
    """활성화 코드 일괄 생성 요청.

    Attributes:
        count: 생성 개수 1~100 (Number of codes to create)
        expiry_days: 유효 일수 0~365, 0 또는 생략 시 무기한 (Days until expiry; 0/None = never)
        note: 관리자 메모 100자 이하 (Admin note)
    """

    count: int = Field(ge=1, le=100)
    expiry_days: int | None = Field(default=None, ge=0, le=365)
    note: str | None = Field(default=None, max_length=100)


class ActivationCodeStatusUpdate(BaseModel):
    """활성화 코드 상태 변경 요청."""

    status: ActivationCodeStatus


class CodeUser(BaseModel):
    """코드를 사용한 사용자 요약."""

    id: str
    username: str
    name: str | None
    email: str | None = None


class ActivationCodeResponse(BaseModel):
    """활성화 코드 응답 스키마."""

    id: str
    code: str
    status: str
    note: str | None
    created_at: datetime
    expires_at: datetime | None
    used_at: datetime | None
    used_by_user: CodeUser | None = None


class ActivationCodeStats(BaseModel):
    """상태별 코드 수 — Counts over all codes, unfiltered."""

    unused: int = 0
    used: int = 0
    expired: int = 0
    disabled: int = 0


class ActivationCodeListResponse(BaseModel):
    """활성화 코드 목록 응답."""

    activation_codes: list[ActivationCodeResponse]
    total: int
    page: int
    per_page: int
    stats: ActivationCodeStats


class ActivationCodeBatchResponse(BaseModel):
    """일괄 생성 결과."""

    success: bool = True
    message: str
    codes: list[ActivationCodeResponse]


class ActivationCodeResult(BaseModel):
    """상태 변경 결과."""

    success: bool = True
    message: str
    activation_code: ActivationCodeResponse
