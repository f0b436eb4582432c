"""관리자 사용자/학생 관리 Pydantic 요청/응답 스키마 정의.

Admin user and student management Pydantic request/response schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from app.schemas.email import EmailResponse
from app.utils.pagination import PaginationMeta


# === 역할 (Role) 스키마 ===

class RoleInfo(BaseModel):
    """역할 요약."""

    id: str
    name: str
    description: str | None


class RoleDistribution(BaseModel):
    """역할별 사용자 수 — Users holding each role."""

    emperor: int = 0
    duke: int = 0
    knight: int = 0
    student: int = 0
    civilian: int = 0


# === 사용자 (User) 스키마 ===

class AdminUserResponse(BaseModel):
    """관리자용 사용자 응답 스키마.

    Attributes:
        id: 사용자 UUID (User identifier)
        username: 로그인 아이디 (Login username)
        name: 표시 이름 (Display name)
        email: 연락처 이메일 (Contact email)
        enabled: 활성 상태 (Account enabled flag)
        roles: 배정된 역할 (Assigned roles, oldest first)
        primary_role: 대표 역할 (First assigned role or civilian)
        emails: 발급된 메일함 (Issued mailboxes)
        email_count: 메일함 수 (Mailbox count)
        permanent_email_count: 영구 메일함 수 (Permanent mailbox count)
        active_email_count: 미만료 메일함 수 (Unexpired mailbox count)
    """

    id: str
    username: str
    name: str | None
    email: str | None
    enabled: bool
    roles: list[RoleInfo]
    primary_role: str
    emails: list[EmailResponse]
    email_count: int
    permanent_email_count: int
    active_email_count: int


class RedeemedCode(BaseModel):
    """사용자가 사용한 활성화 코드."""

    id: str
    code: str
    status: str
    used_at: datetime | None


class AdminUserDetail(AdminUserResponse):
    """관리자용 사용자 상세 — Adds the redeemed activation code."""

    activation_code: RedeemedCode | None = None


class UserSummary(BaseModel):
    """필터된 사용자 집합 요약."""

    total_users: int
    enabled_users: int
    disabled_users: int
    role_distribution: RoleDistribution


class AdminUserListResponse(BaseModel):
    """관리자 사용자 목록 응답."""

    users: list[AdminUserResponse]
    pagination: PaginationMeta
    summary: UserSummary


class UserStatusUpdate(BaseModel):
    """계정 활성/비활성 요청."""

    enabled: bool


class UserBrief(BaseModel):
    """사용자 간단 정보."""

    id: str
    username: str
    name: str | None
    enabled: bool


class UserStatusResponse(BaseModel):
    """계정 상태 변경 결과."""

    success: bool = True
    message: str
    user: UserBrief


class UserRoleUpdate(BaseModel):
    """역할 변경 요청 — Only duke, knight and civilian can be granted."""

    role: Literal["duke", "knight", "civilian"]


class UserRoleResponse(BaseModel):
    """역할 변경 결과."""

    success: bool = True
    message: str
    user: AdminUserResponse


class DeletedCounts(BaseModel):
    """사용자 삭제 시 함께 정리된 레코드 수."""

    emails: int
    api_keys: int
    activation_codes: int
    user_roles: int
    webhooks: int
    refresh_tokens: int


class UserDeleteResponse(BaseModel):
    """사용자 삭제 결과."""

    success: bool = True
    message: str
    deleted_data: DeletedCounts


# === 학생 (Student) 스키마 ===

class StudentResponse(BaseModel):
    """학생 목록 항목."""

    id: str
    username: str
    name: str | None
    enabled: bool
    emails: list[EmailResponse]
    email_count: int
    permanent_email_count: int


class StudentListResponse(BaseModel):
    """학생 목록 응답."""

    students: list[StudentResponse]
    total: int
