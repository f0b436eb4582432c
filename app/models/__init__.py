"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 역할, 사용자, 역할 배정 (Role, User, UserRole)
    token: 리프레시 토큰 (Refresh tokens)
    email: 메일함 및 메시지 (Mailboxes and messages)
    activation_code: 활성화 코드 (Activation codes)
    webhook: 웹훅 설정 (Webhook configuration)
    api_key: API 키 (API keys)
"""

from app.models.user import Role, User, UserRole
from app.models.token import RefreshToken
from app.models.email import Email, Message
from app.models.activation_code import ActivationCode
from app.models.webhook import Webhook
from app.models.api_key import ApiKey

__all__ = [
    "Role", "User", "UserRole",
    "RefreshToken",
    "Email", "Message",
    "ActivationCode",
    "Webhook",
    "ApiKey",
]
