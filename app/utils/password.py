"""비밀번호 및 비밀값 해싱 유틸리티 모듈.

Password and secret hashing utility module built on bcrypt.
Account passwords and API keys are both stored as bcrypt hashes only.
"""

import bcrypt


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text secret using bcrypt with a fresh random salt.

    Args:
        password: 평문 비밀번호 또는 API 키 (Plain text password or API key)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """평문 값과 bcrypt 해시를 비교 검증합니다.

    Verify a plain text secret against a stored bcrypt hash.
    Accounts without a password hash (externally linked) never match.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # 손상된 해시 — malformed stored hash
        return False
