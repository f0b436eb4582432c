"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Services raise these instead of building HTTPException at each call site.
The global handler in app.middleware.error_handler renders every one of
them as ``{"error": detail}``.

Usage:
    from app.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Email not found")
    raise DuplicateError("Email address already in use")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 리소스가 없거나 호출자 소유가 아닐 때.

    Raised when a resource does not exist, or exists but is not visible to
    the caller (another user's mailbox, for example).
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 고유성 위반 (username, address, API key name)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 인증은 되었으나 권한이 없을 때.

    Raised when the caller is authenticated but none of their roles grants
    the permission the endpoint requires.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 자격 증명 누락, 무효, 또는 비활성 계정.

    Raised for missing or invalid credentials and for disabled accounts.
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 비즈니스 규칙 위반.

    Raised for rule violations Pydantic cannot see: an activation code that
    is already used, a second permanent mailbox, an emperor target.
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
