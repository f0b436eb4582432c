"""활성화 코드 모델 — 학생 계정 발급용 일회성 코드.

Activation code model — Single-use codes that provision a student account
together with its permanent mailbox.
"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, UTCDateTime, utcnow

# 활성화 코드 상태 — Allowed status values
ACTIVATION_CODE_STATUSES: tuple[str, ...] = ("unused", "used", "expired", "disabled")


class ActivationCode(Base):
    """활성화 코드 테이블.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        code: 코드 문자열 XXXX-XXXX-XXXX (Unique code string)
        status: unused | used | expired | disabled
        note: 관리자 메모 (Admin note, optional)
        created_at: 생성 일시 (Creation timestamp)
        expires_at: 만료 일시, None이면 무기한 (Expiry, None means never)
        used_at: 사용/만료 처리 일시 (Redemption or expiry timestamp)
        used_by_user_id: 사용한 사용자 (Redeeming user, SET NULL on delete)
    """

    __tablename__ = "activation_codes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="unused", nullable=False, index=True)
    note: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, index=True)
    used_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    used_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    used_by_user = relationship("User", back_populates="activation_codes")
