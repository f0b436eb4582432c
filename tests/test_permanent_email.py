"""영구 메일함 지정 테스트.

Permanent mailbox promotion tests — ordering of the rejection rules, the
one-per-user cap and the candidate listing.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import auth_header, make_email, make_token, make_user

SET_PERMANENT = "/api/v1/emails/set-permanent"
AVAILABLE = "/api/v1/emails/available-for-permanent"


class TestSetPermanent:
    """영구 지정 규칙 테스트."""

    async def test_promote_unexpired_email(self, client: AsyncClient, db, student, student_headers):
        email = await make_email(db, student, "keep@moemail.app")
        res = await client.post(SET_PERMANENT, json={"email_id": str(email.id)}, headers=student_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["success"] is True
        assert data["email"]["is_permanent"] is True
        assert data["email"]["expires_at"].startswith("9999-01-01")

        status = await client.get(SET_PERMANENT, headers=student_headers)
        assert status.json()["has_permanent_email"] is True
        assert status.json()["permanent_email"]["address"] == "keep@moemail.app"

    async def test_second_permanent_rejected(self, client: AsyncClient, db, student, student_headers):
        await make_email(db, student, "perm@moemail.app", permanent=True)
        other = await make_email(db, student, "temp@moemail.app")
        res = await client.post(SET_PERMANENT, json={"email_id": str(other.id)}, headers=student_headers)
        assert res.status_code == 400
        assert res.json() == {"error": "You already have a permanent email"}

    async def test_existing_permanent_checked_before_ownership(self, client: AsyncClient, db, student, student_headers):
        """영구 메일함 보유 검사가 소유 검사보다 먼저."""
        await make_email(db, student, "perm@moemail.app", permanent=True)
        res = await client.post(SET_PERMANENT, json={"email_id": str(uuid.uuid4())}, headers=student_headers)
        assert res.status_code == 400

    async def test_email_not_owned(self, client: AsyncClient, db, knight, student_headers):
        email = await make_email(db, knight, "theirs@moemail.app")
        res = await client.post(SET_PERMANENT, json={"email_id": str(email.id)}, headers=student_headers)
        assert res.status_code == 404

    async def test_expired_email_rejected(self, client: AsyncClient, db, student, student_headers):
        email = await make_email(db, student, "old@moemail.app", hours=-1)
        res = await client.post(SET_PERMANENT, json={"email_id": str(email.id)}, headers=student_headers)
        assert res.status_code == 400
        assert res.json() == {"error": "Cannot make an expired email permanent"}

    async def test_knight_lacks_permission(self, client: AsyncClient, db, knight, knight_headers):
        email = await make_email(db, knight, "box@moemail.app")
        res = await client.post(SET_PERMANENT, json={"email_id": str(email.id)}, headers=knight_headers)
        assert res.status_code == 403

    async def test_primary_role_must_be_student(self, client: AsyncClient, db):
        """황제 권한이 있어도 대표 역할이 학생이 아니면 403."""
        user = await make_user(db, "mixed", "emperor", "student")
        email = await make_email(db, user, "box@moemail.app")
        res = await client.post(
            SET_PERMANENT,
            json={"email_id": str(email.id)},
            headers=auth_header(make_token(user)),
        )
        assert res.status_code == 403

    async def test_status_without_permanent(self, client: AsyncClient, student_headers):
        res = await client.get(SET_PERMANENT, headers=student_headers)
        assert res.status_code == 200
        assert res.json() == {"has_permanent_email": False, "permanent_email": None}


class TestAvailableForPermanent:
    """영구 지정 후보 목록 테스트."""

    async def test_lists_unexpired_temporary_newest_first(self, client: AsyncClient, db, student, student_headers):
        await make_email(db, student, "older@moemail.app", created_offset=-10)
        await make_email(db, student, "newer@moemail.app")
        await make_email(db, student, "expired@moemail.app", hours=-1)

        res = await client.get(AVAILABLE, headers=student_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["can_set_permanent"] is True
        assert [e["address"] for e in data["available_emails"]] == ["newer@moemail.app", "older@moemail.app"]

    async def test_existing_permanent_blocks(self, client: AsyncClient, db, student, student_headers):
        await make_email(db, student, "perm@moemail.app", permanent=True)
        await make_email(db, student, "temp@moemail.app")

        res = await client.get(AVAILABLE, headers=student_headers)
        data = res.json()
        assert data["can_set_permanent"] is False
        assert data["permanent_email"]["address"] == "perm@moemail.app"
        assert data["available_emails"] == []
