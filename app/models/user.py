"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and Role SQLAlchemy ORM model definitions.
Roles are named rows (emperor, duke, knight, student, civilian); their
permission sets live in code (app.utils.permissions), not in the database.

Tables:
    - roles: 역할 (Named roles, created lazily on first assignment)
    - users: 사용자 계정 (User accounts)
    - user_roles: 사용자-역할 매핑 (User to role assignments)
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, UTCDateTime, utcnow


class Role(Base):
    """역할 모델 — 이름으로 식별되는 권한 묶음.

    Role model — A named bundle of permissions.
    The permission set for each name is static (see app.utils.permissions).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 역할 이름 (Role name, unique)
        description: 역할 설명 (Human readable description)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "roles"

    # 역할 고유 식별자 — Role unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 역할 이름 — emperor | duke | knight | student | civilian
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # 역할 설명 — Role description shown in admin listings
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    # 관계 — Relationships
    assignments = relationship("UserRole", back_populates="role")


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Username is globally unique. ``enabled`` gates every authenticated request.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, globally unique)
        name: 표시 이름 (Display name, optional)
        email: 연락처 이메일 (Contact email, optional, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password, nullable for linked accounts)
        enabled: 활성 상태 (Whether the account may sign in)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        role_assignments: 역할 배정 목록, 생성순 (Role assignments, oldest first)
        emails: 발급된 메일함 (Issued mailboxes)
        api_keys: API 키 (API keys)
        webhook: 웹훅 설정 (Webhook config, one per user)
        refresh_tokens: 리프레시 토큰 목록 (Active refresh tokens)
        activation_codes: 사용한 활성화 코드 (Redeemed activation codes)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # 표시 이름 — Display name
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 연락처 이메일 — Contact email (optional)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 활성 상태 — Disabled accounts cannot authenticate
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    # 관계 — Relationships
    role_assignments = relationship(
        "UserRole",
        back_populates="user",
        order_by="UserRole.created_at",
        cascade="all, delete-orphan",
    )
    emails = relationship("Email", back_populates="user", order_by="Email.created_at.desc()")
    api_keys = relationship("ApiKey", back_populates="user")
    webhook = relationship("Webhook", back_populates="user", uselist=False)
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    activation_codes = relationship("ActivationCode", back_populates="used_by_user")

    @property
    def role_names(self) -> list[str]:
        """배정된 역할 이름 목록 — Assigned role names, oldest assignment first."""
        return [assignment.role.name for assignment in self.role_assignments]

    @property
    def primary_role(self) -> str:
        """대표 역할 — First assigned role, civilian when none."""
        names: list[str] = self.role_names
        return names[0] if names else "civilian"


class UserRole(Base):
    """사용자-역할 매핑 모델.

    Association between a user and a role. The earliest assignment is the
    user's primary role.
    """

    __tablename__ = "user_roles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    user = relationship("User", back_populates="role_assignments")
    role = relationship("Role", back_populates="assignments", lazy="joined")
