"""활성화 코드 사용 서비스.

Activation Service — Redeems an activation code into a new student account
with a permanent mailbox.

Every check runs before the first write, and all writes share the
request's transaction. Nothing is committed unless every step succeeds.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import utcnow
from app.models.activation_code import ActivationCode
from app.models.email import PERMANENT_EXPIRES_AT, Email
from app.models.user import Role, User
from app.repositories.activation_code_repository import activation_code_repository
from app.repositories.email_repository import email_repository
from app.repositories.role_repository import role_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    ActivatedEmail,
    ActivatedUser,
    ActivateRequest,
    ActivateResponse,
)
from app.services.auth_service import auth_service
from app.utils.exceptions import BadRequestError, DuplicateError
from app.utils.generators import build_address, validate_local_part
from app.utils.password import hash_password
from app.utils.permissions import Role as RoleName

logger = structlog.get_logger()


class ActivationService:
    """활성화 코드 사용 비즈니스 로직을 처리하는 서비스."""

    async def activate(
        self,
        db: AsyncSession,
        data: ActivateRequest,
    ) -> ActivateResponse:
        """활성화 코드를 사용하여 학생 계정을 생성합니다.

        Redeem an activation code.

        Steps:
            1. 코드가 존재하고 unused인지 확인 (Code exists and is unused)
            2. 만료 시각이 지나지 않았는지 확인 (Code is not past expires_at)
            3. 사용자명 중복 확인 (Username is free)
            4. 영구 메일 주소 검증 및 중복 확인 (Address is valid and free)
            5. 사용자 생성, 학생 역할 배정, 영구 메일함 생성, 코드 사용 처리
               (Create user, assign student role, create permanent mailbox,
               mark the code used)

        Raises:
            BadRequestError: 무효/사용된 코드, 만료된 코드, 잘못된 주소
            DuplicateError: 사용자명 또는 메일 주소 중복
        """
        code: ActivationCode | None = await activation_code_repository.get_by_code(
            db, data.activation_code.strip().upper()
        )
        if code is None or code.status != "unused" or code.used_by_user_id is not None:
            raise BadRequestError("Activation code is invalid or already used")

        now = utcnow()
        if code.expires_at is not None and code.expires_at < now:
            raise BadRequestError("Activation code has expired")

        if await user_repository.get_by_username(db, data.username) is not None:
            raise DuplicateError("Username already exists")

        error: str | None = validate_local_part(data.permanent_email)
        if error is not None:
            raise BadRequestError(error)
        address: str = build_address(data.permanent_email, settings.default_email_domain)
        if await email_repository.get_by_address(db, address) is not None:
            raise DuplicateError("Email address already in use")

        user: User = await user_repository.create(db, {
            "username": data.username,
            "password_hash": hash_password(data.password),
        })
        student_role: Role = await role_repository.get_or_create(db, RoleName.STUDENT.value)
        await role_repository.assign(db, user.id, student_role)

        email: Email = await email_repository.create(db, {
            "address": address,
            "user_id": user.id,
            "created_at": now,
            "expires_at": PERMANENT_EXPIRES_AT,
            "is_permanent": True,
        })

        await activation_code_repository.update(db, code, {
            "status": "used",
            "used_at": now,
            "used_by_user_id": user.id,
        })

        user = await user_repository.get_with_roles(db, user.id)
        tokens = await auth_service.generate_tokens(db, user)

        logger.info(
            "activation_code_redeemed",
            code_id=str(code.id),
            user_id=str(user.id),
            address=address,
        )
        return ActivateResponse(
            message="Account activated",
            user=ActivatedUser(id=str(user.id), username=user.username),
            permanent_email=ActivatedEmail(id=str(email.id), address=email.address),
            tokens=tokens,
        )


# 싱글턴 인스턴스 — Singleton instance
activation_service: ActivationService = ActivationService()
