"""웹훅 설정 Pydantic 스키마."""

from pydantic import BaseModel, HttpUrl, TypeAdapter, ValidationError, field_validator

_http_url: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


class WebhookUpdate(BaseModel):
    """웹훅 저장 요청 — http/https URL only.

    URL은 검증만 하고 입력 그대로 저장 (validated, then kept exactly as sent).
    """

    url: str
    enabled: bool = True

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        try:
            _http_url.validate_python(value)
        except ValidationError as exc:
            raise ValueError("URL must be a valid http or https URL") from exc
        return value


class WebhookResponse(BaseModel):
    """웹훅 설정 응답 — Unsaved config reads as an empty disabled hook."""

    url: str = ""
    enabled: bool = False
