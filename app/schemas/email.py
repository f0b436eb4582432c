"""메일함 및 메시지 관련 Pydantic 요청/응답 스키마 정의.

Mailbox and message Pydantic request/response schema definitions.
Covers the self-service mailbox endpoints, permanent mailbox promotion
and the admin mailbox management used by the user and student consoles.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.utils.pagination import PaginationMeta


# === 메일함 (Email) 스키마 ===

class EmailCreate(BaseModel):
    """메일함 생성 요청 스키마.

    Attributes:
        name: 로컬 파트, 생략 시 무작위 8자 (Local part; random 8 chars when omitted)
        domain: 도메인, 생략 시 기본 도메인 (Domain; first configured when omitted)
        expiry_hours: 유효 시간 1, 24, 72, 168 중 하나 (Lifetime in hours)
    """

    name: str | None = None
    domain: str | None = None
    expiry_hours: Literal[1, 24, 72, 168]


class EmailResponse(BaseModel):
    """메일함 응답 스키마."""

    id: str
    address: str
    is_permanent: bool
    created_at: datetime
    expires_at: datetime
    is_expired: bool = False


class EmailListResponse(BaseModel):
    """내 메일함 목록 응답 — Own unexpired mailboxes, newest first."""

    emails: list[EmailResponse]
    pagination: PaginationMeta


# === 메시지 (Message) 스키마 ===

class MessageSummary(BaseModel):
    """메시지 목록 항목."""

    id: str
    from_address: str | None
    subject: str
    type: str | None
    received_at: datetime


class MessageDetail(MessageSummary):
    """메시지 상세 — Full message including bodies."""

    to_address: str | None
    content: str
    html: str | None
    sent_at: datetime | None


class MessageListResponse(BaseModel):
    """메시지 목록 응답 — Newest first."""

    messages: list[MessageSummary]
    pagination: PaginationMeta


# === 영구 메일함 (Permanent email) 스키마 ===

class SetPermanentRequest(BaseModel):
    """영구 메일함 지정 요청 — Promote one of the caller's mailboxes."""

    email_id: UUID


class SetPermanentResponse(BaseModel):
    """영구 메일함 지정 결과."""

    success: bool = True
    message: str
    email: EmailResponse


class PermanentEmailStatus(BaseModel):
    """영구 메일함 보유 현황."""

    has_permanent_email: bool
    permanent_email: EmailResponse | None = None


class AvailableForPermanentResponse(BaseModel):
    """영구 지정 가능한 메일함 목록.

    Attributes:
        can_set_permanent: 아직 영구 메일함이 없으면 True (True while none is set)
        message: 안내 메시지 (Guidance text)
        permanent_email: 이미 지정된 영구 메일함 (Existing permanent mailbox)
        available_emails: 미만료 비영구 메일함, 최신순 (Unexpired temporary mailboxes)
    """

    can_set_permanent: bool
    message: str
    permanent_email: EmailResponse | None = None
    available_emails: list[EmailResponse] = []


# === 관리자 메일함 (Admin email) 스키마 ===

class AdminEmailCreate(BaseModel):
    """관리자 메일함 추가 요청 스키마.

    Attributes:
        is_permanent: 영구 메일함 여부 (Create as the user's permanent mailbox)
        custom_address: 로컬 파트, 생략 시 무작위 (Local part; random when omitted)
        expiry_hours: 임시 메일함 유효 시간 1~8760 (Lifetime for temporary mailboxes)
    """

    is_permanent: bool = False
    custom_address: str | None = None
    expiry_hours: int = Field(default=24, ge=1, le=8760)


class AdminEmailUpdate(BaseModel):
    """관리자 메일함 수정 요청 스키마 (부분 업데이트)."""

    is_permanent: bool | None = None
    expiry_hours: int | None = Field(default=None, ge=1, le=8760)
    custom_address: str | None = None


class AdminEmailResult(BaseModel):
    """관리자 메일함 추가/수정 결과."""

    success: bool = True
    message: str
    email: EmailResponse


class MailboxOwner(BaseModel):
    """메일함 소유자 요약."""

    id: str
    username: str
    enabled: bool
    primary_role: str


class UserEmailsResponse(BaseModel):
    """사용자 메일함 전체 목록 (관리자용).

    Attributes:
        user: 소유자 요약 (Owner summary)
        emails: 만료 포함 전체 메일함 (All mailboxes including expired)
        total: 전체 수 (Total count)
        permanent_count: 영구 메일함 수 (Permanent count)
        active_count: 미만료 메일함 수 (Unexpired count)
    """

    user: MailboxOwner
    emails: list[EmailResponse]
    total: int
    permanent_count: int
    active_count: int
