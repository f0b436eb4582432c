"""API 키 테스트 — 발급, 관리, X-API-Key 인증.

API key tests — Issuing, toggling, revoking and authenticating with the
X-API-Key header.
"""

import uuid

from httpx import AsyncClient

API_KEYS = "/api/v1/api-keys"
ME = "/api/v1/auth/me"


class TestApiKeys:
    """API 키 CRUD 테스트."""

    async def test_create_returns_plaintext_once(self, client: AsyncClient, duke_headers):
        res = await client.post(f"{API_KEYS}/", json={"name": "ci"}, headers=duke_headers)
        assert res.status_code == 201
        created = res.json()
        assert created["key"].startswith("mk_")
        assert created["key"].startswith(created["key_prefix"])
        assert created["expires_at"] is None

        listed = await client.get(f"{API_KEYS}/", headers=duke_headers)
        assert listed.status_code == 200
        assert len(listed.json()) == 1
        assert "key" not in listed.json()[0]

    async def test_duplicate_name(self, client: AsyncClient, duke_headers):
        await client.post(f"{API_KEYS}/", json={"name": "ci"}, headers=duke_headers)
        res = await client.post(f"{API_KEYS}/", json={"name": "ci"}, headers=duke_headers)
        assert res.status_code == 409

    async def test_knight_forbidden(self, client: AsyncClient, knight_headers):
        res = await client.post(f"{API_KEYS}/", json={"name": "ci"}, headers=knight_headers)
        assert res.status_code == 403

    async def test_update_unknown_key(self, client: AsyncClient, duke_headers):
        res = await client.patch(f"{API_KEYS}/{uuid.uuid4()}", json={"enabled": False}, headers=duke_headers)
        assert res.status_code == 404


class TestApiKeyAuth:
    """X-API-Key 인증 테스트."""

    async def _create(self, client: AsyncClient, headers: dict, **body) -> dict:
        res = await client.post(f"{API_KEYS}/", json={"name": "ci", **body}, headers=headers)
        return res.json()

    async def test_authenticates_owner(self, client: AsyncClient, duke_headers):
        created = await self._create(client, duke_headers)
        res = await client.get(ME, headers={"X-API-Key": created["key"]})
        assert res.status_code == 200
        assert res.json()["username"] == "duke"

    async def test_disabled_key_rejected(self, client: AsyncClient, duke_headers):
        created = await self._create(client, duke_headers)
        res = await client.patch(f"{API_KEYS}/{created['id']}", json={"enabled": False}, headers=duke_headers)
        assert res.status_code == 200
        assert res.json()["enabled"] is False

        res = await client.get(ME, headers={"X-API-Key": created["key"]})
        assert res.status_code == 401

    async def test_deleted_key_rejected(self, client: AsyncClient, duke_headers):
        created = await self._create(client, duke_headers)
        res = await client.delete(f"{API_KEYS}/{created['id']}", headers=duke_headers)
        assert res.status_code == 200
        res = await client.get(ME, headers={"X-API-Key": created["key"]})
        assert res.status_code == 401

    async def test_wrong_key_rejected(self, client: AsyncClient, duke_headers):
        created = await self._create(client, duke_headers)
        res = await client.get(ME, headers={"X-API-Key": created["key"] + "x"})
        assert res.status_code == 401

    async def test_api_key_carries_permissions(self, client: AsyncClient, duke_headers):
        created = await self._create(client, duke_headers)
        res = await client.post(
            "/api/v1/emails/", json={"expiry_hours": 24}, headers={"X-API-Key": created["key"]}
        )
        assert res.status_code == 201
