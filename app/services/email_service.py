"""메일함 서비스 — 메일함 발급, 삭제, 메시지 조회, 영구 지정 비즈니스 로직.

Email Service — Business logic for issuing and deleting mailboxes, reading
their messages, and promoting one mailbox to permanent. Also hosts the
admin-side mailbox operations shared by the user and student consoles.
"""

from datetime import datetime, timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import utcnow
from app.models.email import PERMANENT_EXPIRES_AT, Email, Message
from app.models.user import User
from app.repositories.email_repository import email_repository
from app.schemas.email import (
    AdminEmailCreate,
    AdminEmailResult,
    AdminEmailUpdate,
    AvailableForPermanentResponse,
    EmailCreate,
    EmailListResponse,
    EmailResponse,
    MailboxOwner,
    MessageDetail,
    MessageListResponse,
    MessageSummary,
    PermanentEmailStatus,
    SetPermanentResponse,
    UserEmailsResponse,
)
from app.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from app.utils.generators import build_address, generate_local_part, validate_local_part
from app.utils.pagination import PaginationMeta
from app.utils.permissions import Role as RoleName

logger = structlog.get_logger()

# 무작위 주소 충돌 시 재시도 횟수 — Attempts for a free random address
_RANDOM_ADDRESS_ATTEMPTS: int = 10


def to_email_response(email: Email, now: datetime | None = None) -> EmailResponse:
    """Email 모델을 응답 스키마로 변환 — Convert an Email row to its response."""
    return EmailResponse(
        id=str(email.id),
        address=email.address,
        is_permanent=email.is_permanent,
        created_at=email.created_at,
        expires_at=email.expires_at,
        is_expired=email.is_expired(now),
    )


def _to_message_summary(message: Message) -> MessageSummary:
    return MessageSummary(
        id=str(message.id),
        from_address=message.from_address,
        subject=message.subject,
        type=message.type,
        received_at=message.received_at,
    )


class EmailService:
    """메일함 관련 비즈니스 로직을 처리하는 서비스."""

    async def _resolve_address(
        self,
        db: AsyncSession,
        local_part: str | None,
        domain: str,
    ) -> str:
        """발급할 주소를 결정합니다.

        Validate a requested local part, or pick a free random one.

        Raises:
            BadRequestError: 로컬 파트 규칙 위반 (Local part breaks the rules)
            DuplicateError: 요청 주소가 이미 사용 중 (Requested address taken)
        """
        if local_part:
            error: str | None = validate_local_part(local_part)
            if error is not None:
                raise BadRequestError(error)
            address: str = build_address(local_part, domain)
            if await email_repository.get_by_address(db, address) is not None:
                raise DuplicateError("Email address already in use")
            return address

        for _ in range(_RANDOM_ADDRESS_ATTEMPTS):
            address = build_address(generate_local_part(), domain)
            if await email_repository.get_by_address(db, address) is None:
                return address
        raise BadRequestError("Could not allocate a free address, please retry")

    # === 사용자 메일함 (Self-service mailboxes) ===

    async def list_emails(
        self,
        db: AsyncSession,
        user: User,
        page: int,
        limit: int,
    ) -> EmailListResponse:
        """내 미만료 메일함 목록 — Own unexpired mailboxes, newest first."""
        emails, total = await email_repository.list_active_page(db, user.id, page, limit)
        now = utcnow()
        return EmailListResponse(
            emails=[to_email_response(e, now) for e in emails],
            pagination=PaginationMeta.build(page, limit, total),
        )

    async def create_email(
        self,
        db: AsyncSession,
        user: User,
        data: EmailCreate,
    ) -> EmailResponse:
        """임시 메일함을 발급합니다.

        Issue a temporary mailbox for the caller.

        Rules:
            - 도메인은 EMAIL_DOMAINS 중 하나 (Domain must be configured)
            - 황제가 아니면 MAX_ACTIVE_EMAILS 상한 적용
              (Non-emperors are capped at MAX_ACTIVE_EMAILS unexpired mailboxes)
            - 로컬 파트 검증 또는 무작위 8자 (Validated name or random 8 chars)

        Raises:
            BadRequestError: 잘못된 도메인, 상한 초과, 잘못된 로컬 파트
            DuplicateError: 주소 중복 (Address already in use)
        """
        domain: str = (data.domain or settings.default_email_domain).lower()
        if domain not in [d.lower() for d in settings.EMAIL_DOMAINS]:
            raise BadRequestError("Unsupported email domain")

        if RoleName.EMPEROR.value not in user.role_names:
            active: int = await email_repository.count_active(db, user.id)
            if active >= settings.MAX_ACTIVE_EMAILS:
                raise BadRequestError(
                    f"Active mailbox limit reached ({settings.MAX_ACTIVE_EMAILS})"
                )

        address: str = await self._resolve_address(db, data.name, domain)
        now = utcnow()
        email: Email = await email_repository.create(db, {
            "address": address,
            "user_id": user.id,
            "created_at": now,
            "expires_at": now + timedelta(hours=data.expiry_hours),
            "is_permanent": False,
        })
        logger.info("email_created", user_id=str(user.id), address=address, expiry_hours=data.expiry_hours)
        return to_email_response(email, now)

    async def delete_email(self, db: AsyncSession, user: User, email_id: UUID) -> None:
        """내 메일함 삭제, 메시지는 함께 삭제 — Messages go with the mailbox.

        Raises:
            NotFoundError: 없거나 소유하지 않은 메일함 (Missing or not owned)
        """
        email: Email | None = await email_repository.get_owned(db, email_id, user.id)
        if email is None:
            raise NotFoundError("Email not found")
        await email_repository.delete(db, email)

    async def list_messages(
        self,
        db: AsyncSession,
        user: User,
        email_id: UUID,
        page: int,
        limit: int,
    ) -> MessageListResponse:
        """메일함의 메시지 목록 — Messages of an owned mailbox, newest first."""
        if await email_repository.get_owned(db, email_id, user.id) is None:
            raise NotFoundError("Email not found")
        messages, total = await email_repository.list_messages_page(db, email_id, page, limit)
        return MessageListResponse(
            messages=[_to_message_summary(m) for m in messages],
            pagination=PaginationMeta.build(page, limit, total),
        )

    async def get_message(
        self,
        db: AsyncSession,
        user: User,
        email_id: UUID,
        message_id: UUID,
    ) -> MessageDetail:
        """메시지 상세 — Full message of an owned mailbox."""
        if await email_repository.get_owned(db, email_id, user.id) is None:
            raise NotFoundError("Email not found")
        message: Message | None = await email_repository.get_message(db, email_id, message_id)
        if message is None:
            raise NotFoundError("Message not found")
        return MessageDetail(
            **_to_message_summary(message).model_dump(),
            to_address=message.to_address,
            content=message.content,
            html=message.html,
            sent_at=message.sent_at,
        )

    # === 영구 메일함 (Permanent mailbox) ===

    async def set_permanent(
        self,
        db: AsyncSession,
        user: User,
        email_id: UUID,
    ) -> SetPermanentResponse:
        """내 메일함 하나를 영구 메일함으로 지정합니다.

        Promote one of the caller's mailboxes to permanent.

        Raises:
            ForbiddenError: 대표 역할이 학생이 아님 (Primary role is not student)
            BadRequestError: 이미 영구 메일함 보유, 이미 영구, 만료됨
            NotFoundError: 없거나 소유하지 않은 메일함
        """
        if user.primary_role != RoleName.STUDENT.value:
            raise ForbiddenError("Only students can set a permanent email")

        if await email_repository.get_permanent(db, user.id) is not None:
            raise BadRequestError("You already have a permanent email")

        email: Email | None = await email_repository.get_owned(db, email_id, user.id)
        if email is None:
            raise NotFoundError("Email not found")
        if email.is_permanent:
            raise BadRequestError("Email is already permanent")
        now = utcnow()
        if email.is_expired(now):
            raise BadRequestError("Cannot make an expired email permanent")

        await email_repository.update(db, email, {
            "is_permanent": True,
            "expires_at": PERMANENT_EXPIRES_AT,
        })
        logger.info("email_promoted_permanent", user_id=str(user.id), email_id=str(email.id))
        return SetPermanentResponse(
            message="Permanent email set",
            email=to_email_response(email, now),
        )

    async def get_permanent_status(self, db: AsyncSession, user: User) -> PermanentEmailStatus:
        """영구 메일함 보유 현황 — Whether the caller holds a permanent mailbox."""
        email: Email | None = await email_repository.get_permanent(db, user.id)
        return PermanentEmailStatus(
            has_permanent_email=email is not None,
            permanent_email=to_email_response(email) if email else None,
        )

    async def available_for_permanent(
        self,
        db: AsyncSession,
        user: User,
    ) -> AvailableForPermanentResponse:
        """영구 지정 후보 목록 — Candidates for promotion, or the existing one."""
        existing: Email | None = await email_repository.get_permanent(db, user.id)
        if existing is not None:
            return AvailableForPermanentResponse(
                can_set_permanent=False,
                message="You already have a permanent email",
                permanent_email=to_email_response(existing),
            )

        candidates: list[Email] = await email_repository.list_available_for_permanent(db, user.id)
        now = utcnow()
        return AvailableForPermanentResponse(
            can_set_permanent=True,
            message=(
                "Choose one email to make permanent"
                if candidates
                else "You have no email that can be made permanent"
            ),
            available_emails=[to_email_response(e, now) for e in candidates],
        )

    # === 관리자 메일함 (Admin mailbox management) ===

    async def user_emails_overview(self, db: AsyncSession, user: User) -> UserEmailsResponse:
        """사용자 메일함 전체 현황 — Every mailbox of ``user`` with counters."""
        emails: list[Email] = await email_repository.list_for_user(db, user.id)
        now = utcnow()
        return UserEmailsResponse(
            user=MailboxOwner(
                id=str(user.id),
                username=user.username,
                enabled=user.enabled,
                primary_role=user.primary_role,
            ),
            emails=[to_email_response(e, now) for e in emails],
            total=len(emails),
            permanent_count=sum(1 for e in emails if e.is_permanent),
            active_count=sum(1 for e in emails if not e.is_expired(now)),
        )

    async def admin_add_email(
        self,
        db: AsyncSession,
        user: User,
        data: AdminEmailCreate,
    ) -> AdminEmailResult:
        """관리자가 사용자에게 메일함을 추가합니다.

        Add a mailbox to ``user`` on the first configured domain.

        Raises:
            BadRequestError: 비활성 사용자, 영구 메일함 중복, 잘못된 로컬 파트
            DuplicateError: 주소 중복
        """
        if not user.enabled:
            raise BadRequestError("User account is disabled")

        if data.is_permanent and await email_repository.get_permanent(db, user.id) is not None:
            raise BadRequestError("User already has a permanent email")

        address: str = await self._resolve_address(db, data.custom_address, settings.default_email_domain)
        now = utcnow()
        email: Email = await email_repository.create(db, {
            "address": address,
            "user_id": user.id,
            "created_at": now,
            "expires_at": PERMANENT_EXPIRES_AT if data.is_permanent else now + timedelta(hours=data.expiry_hours),
            "is_permanent": data.is_permanent,
        })
        kind: str = "permanent" if data.is_permanent else "temporary"
        logger.info("admin_email_added", user_id=str(user.id), address=address, kind=kind)
        return AdminEmailResult(
            message=f"Added {kind} email for {user.username}",
            email=to_email_response(email, now),
        )

    async def admin_update_email(
        self,
        db: AsyncSession,
        user: User,
        email_id: UUID,
        data: AdminEmailUpdate,
    ) -> AdminEmailResult:
        """관리자가 사용자 메일함을 수정합니다.

        Update permanence, lifetime or local part of one of ``user``'s
        mailboxes. Making a mailbox permanent pins expires_at to the
        permanent sentinel; making it temporary without expiry_hours gives
        it 24 hours.
        """
        email: Email | None = await email_repository.get_owned(db, email_id, user.id)
        if email is None:
            raise NotFoundError("Email not found for this user")
        if not user.enabled:
            raise BadRequestError("User account is disabled")

        changes: dict = {}
        now = utcnow()

        if data.is_permanent is not None:
            if data.is_permanent and not email.is_permanent:
                existing: Email | None = await email_repository.get_permanent(db, user.id)
                if existing is not None and existing.id != email.id:
                    raise BadRequestError("User already has a permanent email")
            changes["is_permanent"] = data.is_permanent

        becomes_permanent: bool = changes.get("is_permanent", email.is_permanent)
        if becomes_permanent:
            changes["expires_at"] = PERMANENT_EXPIRES_AT
        elif data.expiry_hours is not None:
            changes["expires_at"] = now + timedelta(hours=data.expiry_hours)
        elif email.is_permanent:
            changes["expires_at"] = now + timedelta(hours=24)

        if data.custom_address is not None:
            error: str | None = validate_local_part(data.custom_address)
            if error is not None:
                raise BadRequestError(error)
            address: str = build_address(data.custom_address, settings.default_email_domain)
            taken: Email | None = await email_repository.get_by_address(db, address)
            if taken is not None and taken.id != email.id:
                raise DuplicateError("Email address already in use")
            changes["address"] = address

        await email_repository.update(db, email, changes)
        return AdminEmailResult(message="Email updated", email=to_email_response(email, now))

    async def admin_delete_email(self, db: AsyncSession, user: User, email_id: UUID) -> str:
        """관리자가 사용자 메일함을 삭제합니다 — Returns the removed address."""
        email: Email | None = await email_repository.get_owned(db, email_id, user.id)
        if email is None:
            raise NotFoundError("Email not found for this user")
        address: str = email.address
        await email_repository.delete(db, email)
        logger.info("admin_email_deleted", user_id=str(user.id), address=address)
        return address


# 싱글턴 인스턴스 — Singleton instance
email_service: EmailService = EmailService()
