"""활성화 코드 관리 서비스.

Activation Code Service — Admin listing, batch generation, status changes
and deletion of activation codes.

Status rules:
    - used 코드는 disabled로만 변경 가능 (A used code may only become disabled)
    - 사용자와 연결된 코드는 unused/expired 불가
      (A redeemed code never returns to unused or expired)
    - used로 변경하려면 사용자 연결 필요 (Setting used needs a redeeming user)
    - expired로 변경 시 used_at 기록 (Expiring a code stamps used_at)
    - used 코드는 삭제 불가 (Used codes cannot be deleted)
"""

from datetime import timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.activation_code import ActivationCode
from app.repositories.activation_code_repository import activation_code_repository
from app.schemas.activation_code import (
    ActivationCodeBatchResponse,
    ActivationCodeCreate,
    ActivationCodeListResponse,
    ActivationCodeResponse,
    ActivationCodeResult,
    ActivationCodeStats,
    CodeUser,
)
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.generators import generate_activation_code

logger = structlog.get_logger()


def _to_response(code: ActivationCode, with_user: bool = True) -> ActivationCodeResponse:
    user = code.used_by_user if with_user else None
    return ActivationCodeResponse(
        id=str(code.id),
        code=code.code,
        status=code.status,
        note=code.note,
        created_at=code.created_at,
        expires_at=code.expires_at,
        used_at=code.used_at,
        used_by_user=CodeUser(
            id=str(user.id),
            username=user.username,
            name=user.name,
            email=user.email,
        ) if user else None,
    )


class ActivationCodeService:
    """활성화 코드 관리 비즈니스 로직을 처리하는 서비스."""

    async def _get_or_404(self, db: AsyncSession, code_id: UUID) -> ActivationCode:
        code: ActivationCode | None = await activation_code_repository.get_with_user(db, code_id)
        if code is None:
            raise NotFoundError("Activation code not found")
        return code

    async def list_codes(
        self,
        db: AsyncSession,
        status: str | None,
        search: str | None,
        page: int,
        per_page: int,
    ) -> ActivationCodeListResponse:
        """코드 목록과 상태별 통계 — Filtered page plus unfiltered stats."""
        codes, total = await activation_code_repository.list_page(db, status, search, page, per_page)
        stats: dict[str, int] = await activation_code_repository.stats(db)
        return ActivationCodeListResponse(
            activation_codes=[_to_response(c) for c in codes],
            total=total,
            page=page,
            per_page=per_page,
            stats=ActivationCodeStats(**stats),
        )

    async def generate(
        self,
        db: AsyncSession,
        data: ActivationCodeCreate,
    ) -> ActivationCodeBatchResponse:
        """활성화 코드를 일괄 생성합니다.

        Generate ``data.count`` unique unused codes. Codes colliding within
        the batch or with stored codes are redrawn.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 개수, 유효 일수, 메모 (Count, expiry days, note)

        Returns:
            ActivationCodeBatchResponse: 생성된 코드 목록 (Created codes)
        """
        now = utcnow()
        expires_at = now + timedelta(days=data.expiry_days) if data.expiry_days else None

        codes: set[str] = set()
        while len(codes) < data.count:
            while len(codes) < data.count:
                codes.add(generate_activation_code())
            codes -= await activation_code_repository.existing_codes(db, codes)

        created: list[ActivationCode] = await activation_code_repository.create_many(db, [
            {
                "code": code,
                "status": "unused",
                "note": data.note,
                "created_at": now,
                "expires_at": expires_at,
            }
            for code in sorted(codes)
        ])
        logger.info("activation_codes_generated", count=len(created), expiry_days=data.expiry_days)
        return ActivationCodeBatchResponse(
            message=f"Generated {len(created)} activation codes",
            codes=[_to_response(c, with_user=False) for c in created],
        )

    async def get_code(self, db: AsyncSession, code_id: UUID) -> ActivationCodeResponse:
        return _to_response(await self._get_or_404(db, code_id))

    async def update_status(
        self,
        db: AsyncSession,
        code_id: UUID,
        status: str,
    ) -> ActivationCodeResult:
        """코드 상태를 변경합니다.

        Raises:
            NotFoundError: 코드 없음 (Code not found)
            BadRequestError: 상태 규칙 위반 (Transition not allowed)
        """
        code: ActivationCode = await self._get_or_404(db, code_id)

        if code.status == "used" and status != "disabled":
            raise BadRequestError("A used activation code can only be disabled")
        # 사용자와 연결된 코드는 다시 발급 가능한 상태로 되돌릴 수 없음
        if code.used_by_user_id is not None and status not in ("disabled", "used"):
            raise BadRequestError("A redeemed activation code can only be disabled or marked used")
        if status == "used" and code.used_by_user_id is None:
            raise BadRequestError("Cannot mark a code as used without a redeeming user")

        changes: dict = {"status": status}
        if status == "expired" and code.status != "expired":
            changes["used_at"] = utcnow()

        await activation_code_repository.update(db, code, changes)
        logger.info("activation_code_status_changed", code_id=str(code.id), status=status)
        return ActivationCodeResult(
            message="Activation code status updated",
            activation_code=_to_response(code),
        )

    async def delete_code(self, db: AsyncSession, code_id: UUID) -> None:
        """미사용 코드 삭제 — Used codes are kept for the audit trail.

        Raises:
            BadRequestError: 사용된 코드 (Code already used)
        """
        code: ActivationCode = await self._get_or_404(db, code_id)
        if code.status == "used":
            raise BadRequestError("A used activation code cannot be deleted")
        await activation_code_repository.delete(db, code)
        logger.info("activation_code_deleted", code_id=str(code_id))


# 싱글턴 인스턴스 — Singleton instance
activation_code_service: ActivationCodeService = ActivationCodeService()
