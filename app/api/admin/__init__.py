"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - users: 사용자 관리 (User management, manage_students / promote_user)
    - students: 학생 관리 (Student management, manage_students)
    - activation_codes: 활성화 코드 관리 (Activation codes, manage_config)
"""

from fastapi import APIRouter

from app.api.admin.activation_codes import router as activation_codes_router
from app.api.admin.students import router as students_router
from app.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(users_router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(students_router, prefix="/students", tags=["Admin Students"])
admin_router.include_router(
    activation_codes_router, prefix="/activation-codes", tags=["Admin Activation Codes"]
)
