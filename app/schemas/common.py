"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared by several API domains.
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 성공 메시지 응답 스키마.

    Generic acknowledgement returned by mutations that have no other payload.

    Attributes:
        success: 성공 여부 (Always True for 2xx responses)
        message: 사람이 읽을 수 있는 결과 메시지 (Human readable outcome)
    """

    success: bool = True
    message: str
