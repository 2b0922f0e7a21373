import os
import tempfile
import unittest

from httpx import ASGITransport, AsyncClient

from app.core.config import RefreshTokenConfig
from app.core.database import DatabaseManager
from app.core.dependencies import get_refresh_token_config, get_refresh_token_repository
from app.main import app
from app.repositories.memory import InMemoryRefreshTokenRepository
from app.repositories.refresh_token_repository import RefreshTokenRepository
from app.services.refresh_token import RefreshTokenService


class TestAuthApi(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.repository = InMemoryRefreshTokenRepository()
        self.config = RefreshTokenConfig(cookie_name="refresh_token", ttl_ms=86_400_000, secure=False, same_site="lax")
        self.service = RefreshTokenService(self.repository, self.config)
        app.dependency_overrides[get_refresh_token_repository] = lambda: self.repository
        app.dependency_overrides[get_refresh_token_config] = lambda: self.config

    def tearDown(self):
        app.dependency_overrides.clear()

    async def _request(self, method: str, path: str, token: str | None = None):
        headers = {"Cookie": f"{self.config.cookie_name}={token}"} if token is not None else {}
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            return await client.request(method, f"/api/v1/auth{path}", headers=headers)

    async def test_refresh_rotates_cookie(self):
        v1 = await self.service.issue({"id": "5"})

        response = await self._request("POST", "/refresh", v1)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["expires_in"], 86_400)

        v2 = response.cookies.get("refresh_token")
        self.assertIsNotNone(v2)
        self.assertNotEqual(v2, v1)
        self.assertIn("Max-Age=86400", response.headers["set-cookie"])
        self.assertIn("HttpOnly", response.headers["set-cookie"])
        self.assertEqual(await self.service.resolve_user_id(v2), "5")
        self.assertIsNone(await self.service.resolve_user_id(v1))

    async def test_replayed_refresh_is_rejected_and_cookie_cleared(self):
        v1 = await self.service.issue({"id": "5"})
        first = await self._request("POST", "/refresh", v1)
        self.assertEqual(first.status_code, 200)

        replay = await self._request("POST", "/refresh", v1)

        self.assertEqual(replay.status_code, 401)
        self.assertFalse(replay.json()["success"])
        set_cookie = replay.headers["set-cookie"]
        self.assertTrue(set_cookie.startswith("refresh_token="))
        self.assertIn("Max-Age=0", set_cookie)
        self.assertEqual(len(self.repository), 1)

    async def test_refresh_without_cookie(self):
        response = await self._request("POST", "/refresh")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Refresh token is required")

    async def test_session_resolves_user(self):
        value = await self.service.issue({"id": "11"})

        response = await self._request("GET", "/session", value)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], {"user_id": "11"})

    async def test_session_rejects_unknown_token(self):
        response = await self._request("GET", "/session", "bogus")

        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.json()["success"])

    async def test_logout_revokes_and_clears_cookie(self):
        value = await self.service.issue({"id": "11"})

        response = await self._request("POST", "/logout", value)

        self.assertEqual(response.status_code, 200)
        self.assertIn("Max-Age=0", response.headers["set-cookie"])
        self.assertIsNone(await self.service.resolve_user_id(value))
        self.assertEqual(len(self.repository), 0)

    async def test_logout_without_cookie_succeeds(self):
        response = await self._request("POST", "/logout")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])


class FailingCommitRepository(RefreshTokenRepository):
    async def commit(self) -> None:
        raise ConnectionError("commit failed")


class TestAuthApiWithDatabase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.manager = DatabaseManager()
        self.manager.init(f"sqlite+aiosqlite:///{os.path.join(self.tmpdir.name, 'tokens.db')}")
        await self.manager.create_tables()
        self.config = RefreshTokenConfig(cookie_name="refresh_token", ttl_ms=86_400_000, secure=False, same_site="lax")
        self.repository_class = RefreshTokenRepository

        async def repository_override():
            async for session in self.manager.get_session():
                yield self.repository_class(session)

        app.dependency_overrides[get_refresh_token_repository] = repository_override
        app.dependency_overrides[get_refresh_token_config] = lambda: self.config

    async def asyncTearDown(self):
        app.dependency_overrides.clear()
        await self.manager.close()
        self.tmpdir.cleanup()

    async def _issue(self, user_id: str) -> str:
        async for session in self.manager.get_session():
            value = await RefreshTokenService(RefreshTokenRepository(session), self.config).issue({"id": user_id})
        return value

    async def _resolve(self, value: str):
        async for session in self.manager.get_session():
            user_id = await RefreshTokenService(RefreshTokenRepository(session), self.config).resolve_user_id(value)
        return user_id

    async def _refresh(self, token: str):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            return await client.post("/api/v1/auth/refresh", headers={"Cookie": f"refresh_token={token}"})

    async def test_rotated_token_is_committed_when_cookie_is_sent(self):
        v1 = await self._issue("user-7")

        response = await self._refresh(v1)

        self.assertEqual(response.status_code, 200)
        v2 = response.cookies.get("refresh_token")
        self.assertEqual(await self._resolve(v2), "user-7")
        self.assertIsNone(await self._resolve(v1))

    async def test_failed_commit_sends_no_new_cookie(self):
        v1 = await self._issue("user-7")
        self.repository_class = FailingCommitRepository

        response = await self._refresh(v1)

        self.assertEqual(response.status_code, 500)
        self.assertNotIn("set-cookie", response.headers)
        self.assertEqual(await self._resolve(v1), "user-7")


if __name__ == "__main__":
    unittest.main()
