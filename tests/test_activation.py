"""활성화 코드 사용 테스트 — 학생 계정과 영구 메일함 생성.

Activation redemption tests. Every failure must leave the code unused and
create neither a user nor a mailbox.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.activation_code import ActivationCode
from app.models.email import Email
from app.models.user import User
from tests.conftest import auth_header, make_code, make_email, make_user

ACTIVATE = "/api/v1/auth/activate"


def _payload(**overrides) -> dict:
    data = {
        "activation_code": "ABCD-EFGH-1234",
        "username": "newstudent",
        "password": "longenough",
        "permanent_email": "newstudent",
    }
    data.update(overrides)
    return data


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar()


class TestActivate:
    """활성화 성공 경로."""

    async def test_activate_creates_student_and_permanent_email(self, client: AsyncClient, db):
        code = await make_code(db, "ABCD-EFGH-1234")

        res = await client.post(ACTIVATE, json=_payload())
        assert res.status_code == 201
        data = res.json()
        assert data["success"] is True
        assert data["user"]["username"] == "newstudent"
        assert data["permanent_email"]["address"] == "newstudent@moemail.app"

        me = await client.get("/api/v1/auth/me", headers=auth_header(data["tokens"]["access_token"]))
        assert me.json()["roles"] == ["student"]
        assert "set_permanent_email" in me.json()["permissions"]

        email = (await db.execute(select(Email).where(Email.address == "newstudent@moemail.app"))).scalar_one()
        assert email.is_permanent is True
        assert email.expires_at.year == 9999

        stored = (await db.execute(
            select(ActivationCode).where(ActivationCode.id == code.id).execution_options(populate_existing=True)
        )).scalar_one()
        assert stored.status == "used"
        assert stored.used_at is not None
        assert str(stored.used_by_user_id) == data["user"]["id"]

    async def test_activate_lowercases_address(self, client: AsyncClient, db):
        await make_code(db, "ABCD-EFGH-1234")
        res = await client.post(ACTIVATE, json=_payload(permanent_email="MixedCase"))
        assert res.status_code == 201
        assert res.json()["permanent_email"]["address"] == "mixedcase@moemail.app"


class TestActivateRejections:
    """활성화 실패 — 아무것도 기록되지 않아야 함."""

    async def _assert_untouched(self, db, users_before: int, emails_before: int) -> None:
        assert await _count(db, User) == users_before
        assert await _count(db, Email) == emails_before

    async def test_unknown_code(self, client: AsyncClient, db):
        res = await client.post(ACTIVATE, json=_payload(activation_code="ZZZZ-ZZZZ-ZZZZ"))
        assert res.status_code == 400
        assert res.json() == {"error": "Activation code is invalid or already used"}
        await self._assert_untouched(db, 0, 0)

    async def test_used_code(self, client: AsyncClient, db, knight):
        await make_code(db, "ABCD-EFGH-1234", status="used", used_by=knight)
        res = await client.post(ACTIVATE, json=_payload())
        assert res.status_code == 400
        await self._assert_untouched(db, 1, 0)

    async def test_disabled_code(self, client: AsyncClient, db):
        await make_code(db, "ABCD-EFGH-1234", status="disabled")
        res = await client.post(ACTIVATE, json=_payload())
        assert res.status_code == 400

    async def test_expired_code(self, client: AsyncClient, db):
        code = await make_code(
            db, "ABCD-EFGH-1234",
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        )
        res = await client.post(ACTIVATE, json=_payload())
        assert res.status_code == 400
        assert res.json() == {"error": "Activation code has expired"}
        await self._assert_untouched(db, 0, 0)
        await db.refresh(code)
        assert code.status == "unused"

    async def test_username_taken(self, client: AsyncClient, db, knight):
        code = await make_code(db, "ABCD-EFGH-1234")
        res = await client.post(ACTIVATE, json=_payload(username="knight"))
        assert res.status_code == 409
        await self._assert_untouched(db, 1, 0)
        await db.refresh(code)
        assert code.status == "unused"
        assert code.used_by_user_id is None

    async def test_address_taken(self, client: AsyncClient, db, knight):
        await make_email(db, knight, "newstudent@moemail.app")
        code = await make_code(db, "ABCD-EFGH-1234")
        res = await client.post(ACTIVATE, json=_payload())
        assert res.status_code == 409
        await self._assert_untouched(db, 1, 1)
        await db.refresh(code)
        assert code.status == "unused"

    async def test_invalid_local_part(self, client: AsyncClient, db):
        await make_code(db, "ABCD-EFGH-1234")
        res = await client.post(ACTIVATE, json=_payload(permanent_email="no spaces"))
        assert res.status_code == 400
        await self._assert_untouched(db, 0, 0)

    async def test_local_part_too_short(self, client: AsyncClient, db):
        await make_code(db, "ABCD-EFGH-1234")
        res = await client.post(ACTIVATE, json=_payload(permanent_email="a"))
        assert res.status_code == 400

    async def test_code_redeemable_once(self, client: AsyncClient, db):
        await make_code(db, "ABCD-EFGH-1234")
        first = await client.post(ACTIVATE, json=_payload())
        assert first.status_code == 201
        second = await client.post(ACTIVATE, json=_payload(username="other", permanent_email="other"))
        assert second.status_code == 400
        assert await _count(db, User) == 1
