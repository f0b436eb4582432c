"""역할-권한 테이블 단위 테스트."""

from app.utils.permissions import (
    ASSIGNABLE_ROLES,
    ROLE_PERMISSIONS,
    Permission,
    Role,
    has_permission,
    permissions_for,
)


class TestRolePermissions:
    """역할별 권한 테스트."""

    def test_emperor_holds_everything(self):
        assert ROLE_PERMISSIONS[Role.EMPEROR] == frozenset(Permission)

    def test_civilian_holds_nothing(self):
        assert not permissions_for(["civilian"])

    def test_student_cannot_create_email(self):
        assert not has_permission(["student"], Permission.CREATE_EMAIL)
        assert has_permission(["student"], Permission.SET_PERMANENT_EMAIL)

    def test_only_emperor_manages_students_and_config(self):
        for role in (Role.DUKE, Role.KNIGHT, Role.STUDENT, Role.CIVILIAN):
            assert Permission.MANAGE_STUDENTS not in ROLE_PERMISSIONS[role]
            assert Permission.MANAGE_CONFIG not in ROLE_PERMISSIONS[role]
            assert Permission.PROMOTE_USER not in ROLE_PERMISSIONS[role]

    def test_api_keys_for_duke_not_knight(self):
        assert has_permission(["duke"], "manage_api_key")
        assert not has_permission(["knight"], "manage_api_key")

    def test_union_of_roles(self):
        assert has_permission(["student", "knight"], Permission.CREATE_EMAIL)
        assert has_permission(["student", "knight"], Permission.SET_PERMANENT_EMAIL)

    def test_unknown_role_and_permission(self):
        assert not permissions_for(["pirate"])
        assert not has_permission(["emperor"], "fly")
        assert not has_permission([], Permission.MANAGE_EMAIL)

    def test_assignable_roles(self):
        assert Role.EMPEROR not in ASSIGNABLE_ROLES
        assert Role.STUDENT not in ASSIGNABLE_ROLES
