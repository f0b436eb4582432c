"""역할-권한 매핑 모듈.

Static role to permission table.
Each role name maps to a fixed set of permission codes. A caller holds a
permission when any of their roles grants it.
"""

from enum import Enum


class Role(str, Enum):
    """역할 이름 — Role names."""

    EMPEROR = "emperor"  # 사이트 소유자 (Site owner)
    DUKE = "duke"  # 슈퍼 유저 (Super user)
    KNIGHT = "knight"  # 고급 사용자 (Advanced user)
    STUDENT = "student"  # 활성화 코드 사용자 (Activation code user)
    CIVILIAN = "civilian"  # 일반 사용자 (Regular user)


class Permission(str, Enum):
    """권한 코드 — Permission codes."""

    MANAGE_EMAIL = "manage_email"
    MANAGE_WEBHOOK = "manage_webhook"
    PROMOTE_USER = "promote_user"
    MANAGE_CONFIG = "manage_config"
    MANAGE_API_KEY = "manage_api_key"
    SET_PERMANENT_EMAIL = "set_permanent_email"
    MANAGE_STUDENTS = "manage_students"
    CREATE_EMAIL = "create_email"


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.EMPEROR: frozenset(Permission),
    Role.DUKE: frozenset({
        Permission.MANAGE_EMAIL,
        Permission.MANAGE_WEBHOOK,
        Permission.MANAGE_API_KEY,
        Permission.CREATE_EMAIL,
    }),
    Role.KNIGHT: frozenset({
        Permission.MANAGE_EMAIL,
        Permission.MANAGE_WEBHOOK,
        Permission.CREATE_EMAIL,
    }),
    # 학생은 메일함을 직접 만들 수 없음 — students cannot create mailboxes
    Role.STUDENT: frozenset({
        Permission.MANAGE_EMAIL,
        Permission.MANAGE_WEBHOOK,
        Permission.SET_PERMANENT_EMAIL,
    }),
    Role.CIVILIAN: frozenset(),
}

# 역할 설명 — Descriptions stored on lazily created role rows
ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.EMPEROR: "Emperor (site owner)",
    Role.DUKE: "Duke (super user)",
    Role.KNIGHT: "Knight (advanced user)",
    Role.STUDENT: "Student (activation code user)",
    Role.CIVILIAN: "Civilian (regular user)",
}

# 관리자가 부여할 수 있는 역할 — Roles assignable through the admin role endpoint
ASSIGNABLE_ROLES: tuple[Role, ...] = (Role.DUKE, Role.KNIGHT, Role.CIVILIAN)


def permissions_for(role_names: list[str]) -> set[Permission]:
    """역할 목록의 권한 합집합 — Union of permissions granted by the given roles.

    Unknown role names grant nothing.
    """
    granted: set[Permission] = set()
    for name in role_names:
        try:
            granted |= ROLE_PERMISSIONS[Role(name)]
        except ValueError:
            continue
    return granted


def has_permission(role_names: list[str], permission: Permission | str) -> bool:
    """역할 중 하나라도 권한을 부여하면 True.

    Return True when any of ``role_names`` grants ``permission``.

    Args:
        role_names: 사용자가 가진 역할 이름 목록 (Role names held by the user)
        permission: 확인할 권한 (Permission to check)
    """
    try:
        wanted: Permission = Permission(permission)
    except ValueError:
        return False
    return wanted in permissions_for(role_names)
