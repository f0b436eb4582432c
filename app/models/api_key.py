"""API 키 모델.

API key model. Only a bcrypt hash of the key is stored; ``key_prefix`` is
the leading slice of the plaintext key and narrows the lookup before the
hash is verified.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, UTCDateTime, utcnow


class ApiKey(Base):
    """API 키 테이블.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 소유 사용자 (Owner user)
        name: 키 이름, 사용자 내 고유 (Key label, unique per user)
        key_prefix: 평문 키 앞부분 (Leading characters of the plaintext key)
        key_hash: bcrypt 해시 (bcrypt hash of the full key)
        enabled: 사용 가능 여부 (Whether the key may authenticate)
        created_at: 생성 일시 (Creation timestamp)
        expires_at: 만료 일시, None이면 무기한 (Expiry, None means never)
    """

    __tablename__ = "api_keys"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    key_prefix: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    key_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_api_key_user_name"),
    )

    user = relationship("User", back_populates="api_keys")
