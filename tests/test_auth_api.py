"""Integration tests for auth, admin and health endpoints against in-memory SQLite."""

import unittest

from fastapi.testclient import TestClient

from app.repositories.users import UserRepository
from tests.support import STRONG_PASSWORD, bearer, build_test_app, register_payload


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app, self.session_factory = build_test_app()
        self.client = TestClient(self.app)

    def register(self, **overrides: str) -> dict:
        response = self.client.post("/api/auth/register", json=register_payload(**overrides))
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def me(self, token: str):
        return self.client.get("/api/auth/me", headers=bearer(token))


class TestRegisterAndLogin(ApiTestCase):
    def test_register_returns_token_pair(self) -> None:
        body = self.register()
        self.assertEqual(body["tokenType"], "Bearer")
        self.assertEqual(body["expiresIn"], 3600)
        self.assertTrue(body["accessToken"])
        self.assertTrue(body["refreshToken"])

    def test_access_token_authenticates_refresh_token_does_not(self) -> None:
        body = self.register()
        response = self.me(body["accessToken"])
        self.assertEqual(response.status_code, 200)
        profile = response.json()
        self.assertEqual(profile["username"], "johndoe")
        self.assertEqual(profile["email"], "john@example.com")
        self.assertEqual(profile["role"], "USER")
        self.assertNotIn("passwordHash", profile)
        self.assertEqual(self.me(body["refreshToken"]).status_code, 401)

    def test_duplicate_username_conflicts(self) -> None:
        self.register()
        response = self.client.post(
            "/api/auth/register", json=register_payload(email="other@example.com")
        )
        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertEqual(body["status"], 409)
        self.assertEqual(body["error"], "Conflict")
        self.assertIn("johndoe", body["message"])

    def test_duplicate_email_conflicts(self) -> None:
        self.register()
        response = self.client.post("/api/auth/register", json=register_payload(username="john2"))
        self.assertEqual(response.status_code, 409)

    def test_invalid_registration_is_400_with_field_errors(self) -> None:
        response = self.client.post(
            "/api/auth/register",
            json=register_payload(email="not-an-email", password="alllowercase1"),
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "Validation Failed")
        self.assertIn("email", body["errors"])
        self.assertIn("password", body["errors"])

    def test_login(self) -> None:
        self.register()
        response = self.client.post(
            "/api/auth/login", json={"username": "johndoe", "password": STRONG_PASSWORD}
        )
        self.assertEqual(response.status_code, 200)
        profile = self.me(response.json()["accessToken"]).json()
        self.assertIsNotNone(profile["lastLoginAt"])

    def test_login_with_wrong_password(self) -> None:
        self.register()
        response = self.client.post(
            "/api/auth/login", json={"username": "johndoe", "password": "WrongPass1"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid username or password")

    def test_refresh(self) -> None:
        tokens = self.register()
        response = self.client.post(
            "/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.me(response.json()["accessToken"]).status_code, 200)

    def test_refresh_rejects_access_token(self) -> None:
        tokens = self.register()
        response = self.client.post(
            "/api/auth/refresh", json={"refreshToken": tokens["accessToken"]}
        )
        self.assertEqual(response.status_code, 401)

    def test_me_without_token(self) -> None:
        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["WWW-Authenticate"], "Bearer")

    def test_tampered_token_is_anonymous(self) -> None:
        token = self.register()["accessToken"]
        self.assertEqual(self.me(token[:-10] + "A" * 10).status_code, 401)

    def test_logout_is_stateless(self) -> None:
        token = self.register()["accessToken"]
        response = self.client.post("/api/auth/logout", headers=bearer(token))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Logged out"})
        # No revocation: the token keeps working until it expires.
        self.assertEqual(self.me(token).status_code, 200)

    def test_deleted_user_token_no_longer_authenticates(self) -> None:
        token = self.register()["accessToken"]
        user_id = self.me(token).json()["id"]
        db = self.session_factory()
        try:
            self.assertTrue(UserRepository(db).delete_by_id(user_id))
        finally:
            db.close()
        self.assertEqual(self.me(token).status_code, 401)


class TestAppSettings(unittest.TestCase):
    def test_bcrypt_rounds_come_from_app_settings(self) -> None:
        app, session_factory = build_test_app(BCRYPT_ROUNDS=4)
        client = TestClient(app)
        response = client.post("/api/auth/register", json=register_payload())
        self.assertEqual(response.status_code, 201, response.text)
        db = session_factory()
        try:
            user = UserRepository(db).find_by_username("johndoe")
            self.assertTrue(user.password_hash.startswith("$2b$04$"))
        finally:
            db.close()
        login = client.post(
            "/api/auth/login", json={"username": "johndoe", "password": STRONG_PASSWORD}
        )
        self.assertEqual(login.status_code, 200)


class TestAdmin(ApiTestCase):
    def _make_admin(self, username: str) -> None:
        db = self.session_factory()
        try:
            users = UserRepository(db)
            users.save(users.find_by_username(username).promote_to_admin())
        finally:
            db.close()

    def test_users_listing_requires_admin(self) -> None:
        token = self.register()["accessToken"]
        response = self.client.get("/api/admin/users", headers=bearer(token))
        self.assertEqual(response.status_code, 403)

    def test_role_change_applies_to_existing_token(self) -> None:
        token = self.register()["accessToken"]
        self._make_admin("johndoe")
        response = self.client.get("/api/admin/users", headers=bearer(token))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([u["username"] for u in response.json()], ["johndoe"])

    def test_promote(self) -> None:
        admin_token = self.register()["accessToken"]
        self._make_admin("johndoe")
        jane_token = self.register(username="jane", email="jane@example.com")["accessToken"]
        jane_id = self.me(jane_token).json()["id"]

        response = self.client.post(
            f"/api/admin/users/{jane_id}/promote", headers=bearer(admin_token)
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"], "ADMIN")
        self.assertEqual(self.me(jane_token).json()["role"], "ADMIN")

    def test_promote_unknown_user(self) -> None:
        token = self.register()["accessToken"]
        self._make_admin("johndoe")
        response = self.client.post("/api/admin/users/missing/promote", headers=bearer(token))
        self.assertEqual(response.status_code, 404)


class TestHealth(ApiTestCase):
    def test_health_is_public(self) -> None:
        response = self.client.get("/api/health/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["version"], "0.1.0")

    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").json(), {"message": "Wardrobe API"})
