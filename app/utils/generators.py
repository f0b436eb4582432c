"""무작위 식별자 생성 및 메일 주소 규칙 모듈.

Random identifier generation and mailbox address rules.
All randomness comes from the ``secrets`` module.
"""

import re
import secrets
import string

# 메일 주소 로컬 파트 규칙 — Local part rule for custom addresses
LOCAL_PART_PATTERN: re.Pattern[str] = re.compile(r"^[A-Za-z0-9_-]+$")
LOCAL_PART_MIN_LENGTH: int = 2
LOCAL_PART_MAX_LENGTH: int = 30

# 무작위 로컬 파트 길이 — Length of generated local parts
RANDOM_LOCAL_PART_LENGTH: int = 8

# 활성화 코드 알파벳 — Activation code alphabet (A-Z0-9)
ACTIVATION_CODE_ALPHABET: str = string.ascii_uppercase + string.digits

# API 키 접두어 — Plaintext API key marker and lookup prefix length
API_KEY_MARKER: str = "mk_"
API_KEY_PREFIX_LENGTH: int = 12


def validate_local_part(local_part: str) -> str | None:
    """로컬 파트 검증 — Return an error message, or None when valid."""
    if not LOCAL_PART_PATTERN.match(local_part):
        return "Email prefix may only contain letters, digits, underscores and hyphens"
    if not LOCAL_PART_MIN_LENGTH <= len(local_part) <= LOCAL_PART_MAX_LENGTH:
        return (
            f"Email prefix must be between {LOCAL_PART_MIN_LENGTH} "
            f"and {LOCAL_PART_MAX_LENGTH} characters"
        )
    return None


def generate_local_part(length: int = RANDOM_LOCAL_PART_LENGTH) -> str:
    """무작위 로컬 파트 — Random lower-case alphanumeric local part."""
    alphabet: str = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def build_address(local_part: str, domain: str) -> str:
    """전체 메일 주소 — Lower-cased ``local@domain``."""
    return f"{local_part}@{domain}".lower()


def generate_activation_code() -> str:
    """XXXX-XXXX-XXXX 형식 활성화 코드 생성.

    Generate an activation code of three dash-separated groups of four
    characters drawn from A-Z0-9.
    """
    groups: list[str] = [
        "".join(secrets.choice(ACTIVATION_CODE_ALPHABET) for _ in range(4))
        for _ in range(3)
    ]
    return "-".join(groups)


def generate_api_key() -> tuple[str, str]:
    """API 키 생성 — Return (plaintext key, lookup prefix)."""
    plaintext: str = API_KEY_MARKER + secrets.token_urlsafe(32)
    return plaintext, plaintext[:API_KEY_PREFIX_LENGTH]
