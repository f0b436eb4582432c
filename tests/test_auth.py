"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신, 로그아웃, /me 엔드포인트.

Auth API tests — Registration, login, token refresh, logout, /me and the
credential checks shared by every protected endpoint.
"""

from httpx import AsyncClient

from tests.conftest import DEFAULT_PASSWORD, auth_header, make_token, make_user

AUTH = "/api/v1/auth"


# ===== Register =====

class TestRegister:
    """자가 회원가입 테스트."""

    async def test_register_assigns_default_role(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "new_user",
            "password": "longenough",
        })
        assert res.status_code == 201
        tokens = res.json()
        assert tokens["token_type"] == "bearer"

        me = await client.get(f"{AUTH}/me", headers=auth_header(tokens["access_token"]))
        assert me.status_code == 200
        assert me.json()["roles"] == ["civilian"]
        assert me.json()["primary_role"] == "civilian"
        assert me.json()["permissions"] == []

    async def test_register_duplicate_username(self, client: AsyncClient, knight):
        res = await client.post(f"{AUTH}/register", json={
            "username": "knight",
            "password": "longenough",
        })
        assert res.status_code == 409
        assert res.json() == {"error": "Username already exists"}

    async def test_register_invalid_username(self, client: AsyncClient):
        """허용되지 않는 문자는 400."""
        res = await client.post(f"{AUTH}/register", json={
            "username": "bad name!",
            "password": "longenough",
        })
        assert res.status_code == 400
        assert "username" in res.json()["error"]

    async def test_register_username_too_long(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "a" * 21,
            "password": "longenough",
        })
        assert res.status_code == 400

    async def test_register_short_password(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "shorty",
            "password": "short",
        })
        assert res.status_code == 400


# ===== Login =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, knight):
        res = await client.post(f"{AUTH}/login", json={
            "username": "knight",
            "password": DEFAULT_PASSWORD,
        })
        assert res.status_code == 200
        data = res.json()
        assert "access_token" in data
        assert "refresh_token" in data

    async def test_login_wrong_password(self, client: AsyncClient, knight):
        res = await client.post(f"{AUTH}/login", json={
            "username": "knight",
            "password": "wrong_password",
        })
        assert res.status_code == 401
        assert res.json() == {"error": "Invalid username or password"}

    async def test_login_unknown_user(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={
            "username": "ghost",
            "password": "whatever1",
        })
        assert res.status_code == 401

    async def test_login_disabled_account(self, client: AsyncClient, db):
        await make_user(db, "sleeper", "knight", enabled=False)
        res = await client.post(f"{AUTH}/login", json={
            "username": "sleeper",
            "password": DEFAULT_PASSWORD,
        })
        assert res.status_code == 401
        assert res.json() == {"error": "Account is disabled"}


# ===== Refresh / Logout =====

class TestTokenRotation:
    """토큰 갱신 및 로그아웃 테스트."""

    async def _login(self, client: AsyncClient) -> dict:
        res = await client.post(f"{AUTH}/login", json={
            "username": "knight",
            "password": DEFAULT_PASSWORD,
        })
        return res.json()

    async def test_refresh_issues_new_pair(self, client: AsyncClient, knight):
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        assert res.json()["refresh_token"] != tokens["refresh_token"]

    async def test_refresh_token_is_single_use(self, client: AsyncClient, knight):
        """갱신 후 이전 리프레시 토큰은 폐기됨."""
        tokens = await self._login(client)
        await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401

    async def test_refresh_rejects_access_token(self, client: AsyncClient, knight):
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["access_token"]})
        assert res.status_code == 401

    async def test_refresh_garbage(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "not-a-jwt"})
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, knight):
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401


# ===== /me and credential checks =====

class TestMe:
    """프로필 및 인증 검사 테스트."""

    async def test_me_lists_sorted_permissions(self, client: AsyncClient, duke, duke_headers):
        res = await client.get(f"{AUTH}/me", headers=duke_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["username"] == "duke"
        assert data["primary_role"] == "duke"
        assert data["permissions"] == [
            "create_email",
            "manage_api_key",
            "manage_email",
            "manage_webhook",
        ]

    async def test_me_without_credentials(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_me_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("invalid.token.here"))
        assert res.status_code == 401

    async def test_me_refresh_token_rejected(self, client: AsyncClient, knight):
        login = await client.post(f"{AUTH}/login", json={
            "username": "knight",
            "password": DEFAULT_PASSWORD,
        })
        res = await client.get(f"{AUTH}/me", headers=auth_header(login.json()["refresh_token"]))
        assert res.status_code == 401

    async def test_disabled_user_token_rejected(self, client: AsyncClient, db):
        """발급 후 비활성화된 계정의 토큰은 401."""
        user = await make_user(db, "sleeper", "knight", enabled=False)
        res = await client.get(f"{AUTH}/me", headers=auth_header(make_token(user)))
        assert res.status_code == 401
        assert res.json() == {"error": "Account is disabled"}

    async def test_request_id_echoed(self, client: AsyncClient):
        res = await client.get("/health", headers={"X-Request-Id": "abc-123"})
        assert res.status_code == 200
        assert res.headers["X-Request-Id"] == "abc-123"
