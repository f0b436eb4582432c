"""관리자 학생 관리 서비스.

Admin Student Service — The user console narrowed to accounts holding the
student role. Every target lookup rejects non-students with 400.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.email import AdminEmailCreate, AdminEmailResult, UserEmailsResponse
from app.schemas.user import (
    AdminUserDetail,
    StudentListResponse,
    StudentResponse,
    UserStatusResponse,
)
from app.services.email_service import to_email_response
from app.services.user_service import user_service
from app.utils.exceptions import BadRequestError
from app.utils.permissions import Role as RoleName


class StudentService:
    """학생 계정 관리 비즈니스 로직을 처리하는 서비스."""

    async def _get_student(self, db: AsyncSession, user_id: UUID) -> User:
        """학생 대상 조회 — 404 when missing, 400 when not a student."""
        user: User = await user_service.get_target(db, user_id)
        if RoleName.STUDENT.value not in user.role_names:
            raise BadRequestError("User is not a student")
        return user

    async def list_students(
        self,
        db: AsyncSession,
        search: str | None,
        status: str,
    ) -> StudentListResponse:
        """학생 목록, 최신순 — Students filtered by username and status."""
        users: list[User] = await user_repository.list_all(
            db, search, status, RoleName.STUDENT.value, username_only=True
        )
        now = utcnow()
        students: list[StudentResponse] = []
        for user in users:
            emails = list(user.emails)
            students.append(StudentResponse(
                id=str(user.id),
                username=user.username,
                name=user.name,
                enabled=user.enabled,
                emails=[to_email_response(e, now) for e in emails],
                email_count=len(emails),
                permanent_email_count=sum(1 for e in emails if e.is_permanent),
            ))
        return StudentListResponse(students=students, total=len(students))

    async def get_student(self, db: AsyncSession, user_id: UUID) -> AdminUserDetail:
        await self._get_student(db, user_id)
        return await user_service.get_user(db, user_id)

    async def set_status(self, db: AsyncSession, user_id: UUID, enabled: bool) -> UserStatusResponse:
        user: User = await self._get_student(db, user_id)
        return await user_service.set_status(db, user, enabled)

    async def list_emails(self, db: AsyncSession, user_id: UUID) -> UserEmailsResponse:
        user: User = await self._get_student(db, user_id)
        return await user_service.list_user_emails(db, user)

    async def add_email(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: AdminEmailCreate,
    ) -> AdminEmailResult:
        user: User = await self._get_student(db, user_id)
        return await user_service.add_user_email(db, user, data)


# 싱글턴 인스턴스 — Singleton instance
student_service: StudentService = StudentService()
