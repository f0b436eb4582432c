"""관리자 사용자 API 테스트 — 목록, 상세, 상태/역할 변경, 삭제, 메일함 관리.

Admin user API tests — Listing with filters and summary, detail, enable
toggle, role change, full deletion and the per-user mailbox console.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.activation_code import ActivationCode
from app.models.api_key import ApiKey
from app.models.email import Email, Message
from app.models.user import User, UserRole
from app.models.webhook import Webhook
from tests.conftest import auth_header, make_code, make_email, make_message, make_token, make_user

USERS = "/api/v1/admin/users"


async def _count(db, model, *where) -> int:
    query = select(func.count()).select_from(model)
    if where:
        query = query.where(*where)
    return (await db.execute(query)).scalar()


class TestListUsers:
    """사용자 목록 테스트."""

    async def test_list_with_summary(self, client: AsyncClient, db, emperor, emperor_headers, knight, student):
        await make_user(db, "sleepy", "civilian", enabled=False)
        await make_email(db, knight, "k1@moemail.app")

        res = await client.get(f"{USERS}/", headers=emperor_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["pagination"]["total"] == 4
        summary = data["summary"]
        assert summary["total_users"] == 4
        assert summary["enabled_users"] == 3
        assert summary["disabled_users"] == 1
        assert summary["role_distribution"] == {
            "emperor": 1, "duke": 0, "knight": 1, "student": 1, "civilian": 1,
        }

        by_name = {u["username"]: u for u in data["users"]}
        assert by_name["knight"]["email_count"] == 1
        assert by_name["knight"]["active_email_count"] == 1
        assert by_name["knight"]["primary_role"] == "knight"
        assert by_name["knight"]["roles"][0]["name"] == "knight"

    async def test_filters(self, client: AsyncClient, db, emperor_headers, knight, student):
        await make_user(db, "sleepy", "student", enabled=False)

        res = await client.get(f"{USERS}/", params={"role": "student"}, headers=emperor_headers)
        assert {u["username"] for u in res.json()["users"]} == {"student", "sleepy"}

        res = await client.get(f"{USERS}/", params={"role": "student", "status": "enabled"}, headers=emperor_headers)
        assert [u["username"] for u in res.json()["users"]] == ["student"]

        res = await client.get(f"{USERS}/", params={"search": "KNI"}, headers=emperor_headers)
        assert [u["username"] for u in res.json()["users"]] == ["knight"]
        assert res.json()["summary"]["role_distribution"]["knight"] == 1
        assert res.json()["summary"]["role_distribution"]["emperor"] == 0

    async def test_search_wildcards_match_literally(self, client: AsyncClient, db, emperor_headers, knight):
        await make_user(db, "under_score", "civilian")

        res = await client.get(f"{USERS}/", params={"search": "_"}, headers=emperor_headers)
        assert [u["username"] for u in res.json()["users"]] == ["under_score"]

        res = await client.get(f"{USERS}/", params={"search": "%"}, headers=emperor_headers)
        assert res.json()["users"] == []
        assert res.json()["summary"]["total_users"] == 0

    async def test_invalid_status_filter(self, client: AsyncClient, emperor_headers):
        res = await client.get(f"{USERS}/", params={"status": "sleeping"}, headers=emperor_headers)
        assert res.status_code == 400

    async def test_requires_manage_students(self, client: AsyncClient, duke_headers):
        res = await client.get(f"{USERS}/", headers=duke_headers)
        assert res.status_code == 403


class TestUserDetailAndStatus:
    """사용자 상세 및 상태 변경 테스트."""

    async def test_detail_includes_redeemed_code(self, client: AsyncClient, db, emperor_headers, student):
        await make_code(db, "AAAA-BBBB-CCCC", status="used", used_by=student)
        res = await client.get(f"{USERS}/{student.id}", headers=emperor_headers)
        assert res.status_code == 200
        assert res.json()["activation_code"]["code"] == "AAAA-BBBB-CCCC"

    async def test_detail_not_found(self, client: AsyncClient, emperor_headers):
        res = await client.get(f"{USERS}/{uuid.uuid4()}", headers=emperor_headers)
        assert res.status_code == 404

    async def test_disable_and_enable(self, client: AsyncClient, emperor_headers, knight):
        res = await client.put(f"{USERS}/{knight.id}", json={"enabled": False}, headers=emperor_headers)
        assert res.status_code == 200
        assert res.json()["user"]["enabled"] is False

        res = await client.put(f"{USERS}/{knight.id}", json={"enabled": True}, headers=emperor_headers)
        assert res.json()["user"]["enabled"] is True

    async def test_emperor_cannot_be_disabled(self, client: AsyncClient, emperor, emperor_headers):
        res = await client.put(f"{USERS}/{emperor.id}", json={"enabled": False}, headers=emperor_headers)
        assert res.status_code == 400


class TestChangeRole:
    """역할 변경 테스트."""

    async def test_replaces_all_roles(self, client: AsyncClient, db, emperor_headers):
        user = await make_user(db, "multi", "student", "knight")
        res = await client.put(f"{USERS}/{user.id}/role", json={"role": "duke"}, headers=emperor_headers)
        assert res.status_code == 200
        assert [r["name"] for r in res.json()["user"]["roles"]] == ["duke"]
        assert res.json()["user"]["primary_role"] == "duke"
        assert await _count(db, UserRole, UserRole.user_id == user.id) == 1

    async def test_cannot_grant_emperor_or_student(self, client: AsyncClient, emperor_headers, knight):
        for role in ("emperor", "student"):
            res = await client.put(f"{USERS}/{knight.id}/role", json={"role": role}, headers=emperor_headers)
            assert res.status_code == 400

    async def test_emperor_target_rejected(self, client: AsyncClient, db, emperor_headers):
        other = await make_user(db, "other_emperor", "emperor")
        res = await client.put(f"{USERS}/{other.id}/role", json={"role": "civilian"}, headers=emperor_headers)
        assert res.status_code == 400

    async def test_emperor_changing_own_role_rejected(self, client: AsyncClient, db):
        """promote_user 권한은 황제만 보유하므로 자기 변경도 거부됨."""
        admin = await make_user(db, "admin2", "emperor")
        res = await client.put(
            f"{USERS}/{admin.id}/role", json={"role": "duke"}, headers=auth_header(make_token(admin))
        )
        assert res.status_code == 400


class TestDeleteUser:
    """사용자 삭제 테스트."""

    async def test_delete_cascades(self, client: AsyncClient, db, emperor_headers, student):
        email = await make_email(db, student, "s1@moemail.app", permanent=True)
        await make_message(db, email, "hi")
        code = await make_code(db, "AAAA-BBBB-CCCC", status="used", used_by=student)
        db.add(ApiKey(user_id=student.id, name="k", key_prefix="mk_abc", key_hash="x"))
        db.add(Webhook(user_id=student.id, url="https://example.com/h"))
        await db.commit()

        res = await client.delete(f"{USERS}/{student.id}", headers=emperor_headers)
        assert res.status_code == 200
        assert res.json()["deleted_data"] == {
            "emails": 1,
            "api_keys": 1,
            "activation_codes": 1,
            "user_roles": 1,
            "webhooks": 1,
            "refresh_tokens": 0,
        }

        assert await _count(db, User, User.id == student.id) == 0
        assert await _count(db, Email) == 0
        assert await _count(db, Message) == 0
        assert await _count(db, ApiKey) == 0
        assert await _count(db, Webhook) == 0
        assert await _count(db, UserRole, UserRole.user_id == student.id) == 0

        # 사용된 코드는 남고 사용자 연결만 해제 — code is kept, detached
        row = (await db.execute(
            select(ActivationCode.status, ActivationCode.used_by_user_id).where(ActivationCode.id == code.id)
        )).one()
        assert row.status == "used"
        assert row.used_by_user_id is None

    async def test_emperor_cannot_be_deleted(self, client: AsyncClient, emperor, emperor_headers):
        res = await client.delete(f"{USERS}/{emperor.id}", headers=emperor_headers)
        assert res.status_code == 400

    async def test_delete_unknown_user(self, client: AsyncClient, emperor_headers):
        res = await client.delete(f"{USERS}/{uuid.uuid4()}", headers=emperor_headers)
        assert res.status_code == 404


class TestUserEmails:
    """관리자 메일함 관리 테스트."""

    async def test_overview(self, client: AsyncClient, db, emperor_headers, knight):
        await make_email(db, knight, "live@moemail.app")
        await make_email(db, knight, "dead@moemail.app", hours=-1)
        await make_email(db, knight, "perm@moemail.app", permanent=True)

        res = await client.get(f"{USERS}/{knight.id}/emails", headers=emperor_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 3
        assert data["permanent_count"] == 1
        assert data["active_count"] == 2
        assert data["user"]["username"] == "knight"

    async def test_add_temporary_and_permanent(self, client: AsyncClient, emperor_headers, knight):
        res = await client.post(
            f"{USERS}/{knight.id}/emails",
            json={"custom_address": "Temp_Box", "expiry_hours": 48},
            headers=emperor_headers,
        )
        assert res.status_code == 201
        assert res.json()["email"]["address"] == "temp_box@moemail.app"
        assert res.json()["email"]["is_permanent"] is False

        res = await client.post(
            f"{USERS}/{knight.id}/emails", json={"is_permanent": True}, headers=emperor_headers
        )
        assert res.status_code == 201
        assert res.json()["email"]["expires_at"].startswith("9999-01-01")

        res = await client.post(
            f"{USERS}/{knight.id}/emails", json={"is_permanent": True}, headers=emperor_headers
        )
        assert res.status_code == 400

    async def test_add_duplicate_address(self, client: AsyncClient, db, emperor_headers, knight, duke):
        await make_email(db, duke, "taken@moemail.app")
        res = await client.post(
            f"{USERS}/{knight.id}/emails", json={"custom_address": "taken"}, headers=emperor_headers
        )
        assert res.status_code == 409

    async def test_add_to_disabled_user(self, client: AsyncClient, db, emperor_headers):
        user = await make_user(db, "sleepy", "knight", enabled=False)
        res = await client.post(f"{USERS}/{user.id}/emails", json={}, headers=emperor_headers)
        assert res.status_code == 400

    async def test_expiry_hours_bounds(self, client: AsyncClient, emperor_headers, knight):
        res = await client.post(
            f"{USERS}/{knight.id}/emails", json={"expiry_hours": 8761}, headers=emperor_headers
        )
        assert res.status_code == 400

    async def test_update_and_delete(self, client: AsyncClient, db, emperor_headers, knight):
        email = await make_email(db, knight, "box@moemail.app")

        res = await client.put(
            f"{USERS}/{knight.id}/emails/{email.id}", json={"is_permanent": True}, headers=emperor_headers
        )
        assert res.status_code == 200
        assert res.json()["email"]["is_permanent"] is True
        assert res.json()["email"]["expires_at"].startswith("9999-01-01")

        res = await client.put(
            f"{USERS}/{knight.id}/emails/{email.id}",
            json={"is_permanent": False, "custom_address": "renamed"},
            headers=emperor_headers,
        )
        assert res.status_code == 200
        data = res.json()["email"]
        assert data["is_permanent"] is False
        assert data["address"] == "renamed@moemail.app"
        assert not data["expires_at"].startswith("9999")

        res = await client.delete(f"{USERS}/{knight.id}/emails/{email.id}", headers=emperor_headers)
        assert res.status_code == 200
        assert await _count(db, Email) == 0

    async def test_update_email_of_other_user(self, client: AsyncClient, db, emperor_headers, knight, duke):
        email = await make_email(db, duke, "box@moemail.app")
        res = await client.put(
            f"{USERS}/{knight.id}/emails/{email.id}", json={"expiry_hours": 1}, headers=emperor_headers
        )
        assert res.status_code == 404
