"""메일함 및 수신 메시지 모델.

Mailbox and received message models.

Tables:
    - emails: 발급된 메일 주소 (Issued addresses with expiry / permanent flag)
    - messages: 수신 메시지, 이 서비스에서는 읽기 전용 (Received messages, read-only here)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, UTCDateTime, utcnow

# 영구 메일함의 만료 시각 — expires_at value stored for permanent mailboxes
PERMANENT_EXPIRES_AT: datetime = datetime(9999, 1, 1, tzinfo=timezone.utc)


class Email(Base):
    """메일함 모델 — 사용자에게 발급된 주소.

    Mailbox model — An address issued to a user.
    Addresses are stored lower-case and are globally unique. A permanent
    mailbox carries ``PERMANENT_EXPIRES_AT``; each user holds at most one.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        address: 전체 메일 주소 (Full lower-case address)
        user_id: 소유 사용자 (Owner user)
        created_at: 생성 일시 (Creation timestamp)
        expires_at: 만료 일시 (Expiry timestamp)
        is_permanent: 영구 여부 (Permanent flag)
    """

    __tablename__ = "emails"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    address: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    is_permanent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="emails")
    messages = relationship(
        "Message",
        back_populates="email",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        """만료 여부 — Whether expires_at is in the past."""
        return self.expires_at < (now or utcnow())


class Message(Base):
    """수신 메시지 모델.

    Message received by a mailbox. Rows are written by the mail ingestion
    side; this service only lists and reads them.
    """

    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("emails.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    to_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subject: Mapped[str] = mapped_column(String(998), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    html: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 메시지 유형 — "received" | "sent"
    type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    received_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    email = relationship("Email", back_populates="messages")
