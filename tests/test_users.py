import unittest

from api_case import ApiTestCase
from models.user import User
from utils.security import decode_token


class TestRegistration(ApiTestCase):
    def test_register_persists_one_user_with_role(self):
        resp = self.register("alice", "pw1")

        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(body["username"], "alice")

        rows = self.db.query(User).filter(User.username == "alice").all()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].role, "customer")

    def test_password_is_not_stored_in_plain_text(self):
        self.register("alice", "pw1")
        user = User.by_username(self.db, "alice")
        self.assertNotEqual(user.password_hash, "pw1")
        self.assertNotIn("pw1", user.password_hash)

    def test_duplicate_username_is_rejected(self):
        self.assertEqual(self.register("alice", "pw1").status_code, 201)
        resp = self.register("alice", "other")

        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.db.query(User).count(), 1)

    def test_blank_fields_are_rejected(self):
        self.assertEqual(self.register("", "pw").status_code, 422)
        self.assertEqual(self.register("bob", "").status_code, 422)
        self.assertEqual(self.register("   ", "pw").status_code, 422)
        self.assertEqual(self.register("bob", " \t ").status_code, 422)
        self.assertEqual(self.db.query(User).count(), 0)

    def test_username_is_stored_trimmed(self):
        self.assertEqual(self.register("  alice ", "pw1").status_code, 201)
        self.assertIsNotNone(User.by_username(self.db, "alice"))

    def test_stale_token_does_not_block_public_registration(self):
        resp = self.client.post(
            "/api/users/register",
            json={"username": "carol", "password": "pw"},
            headers={"Authorization": "Bearer expired.or.garbage"},
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["role"], "customer")

    def test_stale_token_cannot_register_admin(self):
        resp = self.client.post(
            "/api/users/register",
            json={"username": "carol", "password": "pw", "role": "admin"},
            headers={"Authorization": "Bearer expired.or.garbage"},
        )
        self.assertEqual(resp.status_code, 403)

    def test_public_caller_cannot_register_admin(self):
        resp = self.register("mallory", "pw", role="admin")
        self.assertEqual(resp.status_code, 403)
        self.assertIsNone(User.by_username(self.db, "mallory"))

    def test_admin_can_register_admin(self):
        self.create_admin()
        resp = self.client.post(
            "/api/users/register",
            json={"username": "ops", "password": "pw", "role": "admin"},
            headers=self.auth("root", "rootpw"),
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["role"], "admin")

    def test_unknown_role_is_rejected(self):
        self.assertEqual(self.register("eve", "pw", role="superuser").status_code, 422)


class TestLogin(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.register("alice", "pw1")

    def test_login_issues_token_with_claims(self):
        resp = self.client.post("/api/users/login", json={"username": "alice", "password": "pw1"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["token_type"], "bearer")
        self.assertEqual(body["role"], "customer")

        claims = decode_token(body["access_token"])
        self.assertEqual(claims["sub"], "alice")
        self.assertEqual(claims["role"], "customer")
        self.assertEqual(claims["uid"], User.by_username(self.db, "alice").id)
        self.assertIn("exp", claims)

    def test_wrong_password_is_rejected(self):
        resp = self.client.post("/api/users/login", json={"username": "alice", "password": "nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertNotIn("access_token", resp.json())

    def test_unknown_user_is_rejected(self):
        resp = self.client.post("/api/users/login", json={"username": "ghost", "password": "pw1"})
        self.assertEqual(resp.status_code, 401)

    def test_me_returns_current_user(self):
        resp = self.client.get("/api/users/me", headers=self.auth("alice", "pw1"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["username"], "alice")

    def test_me_requires_token(self):
        self.assertEqual(self.client.get("/api/users/me").status_code, 401)

    def test_me_rejects_garbage_token(self):
        resp = self.client.get("/api/users/me", headers={"Authorization": "Bearer not.a.jwt"})
        self.assertEqual(resp.status_code, 401)


if __name__ == "__main__":
    unittest.main()
