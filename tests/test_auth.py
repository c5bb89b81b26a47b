"""Tests for /api/auth/* and the session guard shared by all protected routes."""

from fastapi.testclient import TestClient

from tests.conftest import TEST_PASSWORD, TEST_SECRET, create_year, make_token


class TestLogin:
    def test_valid_credentials_return_user_token_and_year(self, client: TestClient, admin_user):
        create_year("2024")
        latest = create_year("2025")

        r = client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": TEST_PASSWORD},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["user"]["email"] == "admin@example.com"
        assert "passwordHash" not in body["user"]
        assert body["currentYear"] == {
            "id": latest["id"],
            "name": "2025",
            "createdAt": latest["createdAt"],
        }
        assert body["token"]

    def test_sets_http_only_cookie(self, client: TestClient, admin_user):
        r = client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": TEST_PASSWORD},
        )
        cookie = r.headers["set-cookie"]
        assert cookie.startswith("auth-token=")
        assert "HttpOnly" in cookie
        assert "SameSite=strict" in cookie
        assert "Max-Age=604800" in cookie

    def test_email_is_case_insensitive(self, client: TestClient, admin_user):
        r = client.post(
            "/api/auth/login",
            json={"email": "Admin@Example.com", "password": TEST_PASSWORD},
        )
        assert r.status_code == 200

    def test_no_years_gives_null_current_year(self, client: TestClient, admin_user):
        r = client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": TEST_PASSWORD},
        )
        assert r.json()["currentYear"] is None

    def test_wrong_password_and_unknown_email_look_the_same(self, client: TestClient, admin_user):
        wrong_password = client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": "nope-nope"},
        )
        unknown_email = client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": TEST_PASSWORD},
        )
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}

    def test_invalid_email_is_a_validation_error(self, client: TestClient):
        r = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
        assert r.status_code == 400
        assert r.json()["detail"] == "Validation failed"
        assert r.json()["errors"][0]["field"] == "email"


class TestMe:
    def test_cookie_session(self, client: TestClient, admin_user):
        client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": TEST_PASSWORD},
        )
        r = client.get("/api/auth/me")
        assert r.status_code == 200
        assert r.json()["user"]["id"] == admin_user["id"]

    def test_bearer_session(self, client: TestClient, editor_user):
        year = create_year("2025")
        token = make_token(editor_user, year=year)
        r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        assert r.json()["user"]["role"] == "EDITOR"
        assert r.json()["currentYear"] == {"id": year["id"], "name": "2025"}

    def test_logout_clears_cookie(self, client: TestClient, admin_user):
        client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": TEST_PASSWORD},
        )
        r = client.post("/api/auth/logout")
        assert r.status_code == 200
        assert 'auth-token=""' in r.headers["set-cookie"]
        assert client.get("/api/auth/me").status_code == 401


class TestSessionGuard:
    def test_missing_token_returns_401(self, client: TestClient):
        r = client.get("/api/auth/me")
        assert r.status_code == 401
        assert r.json()["detail"] == "Not authenticated"

    def test_missing_token_never_reads_dynamodb(self, client: TestClient, monkeypatch):
        import shared.db  # noqa: PLC0415

        def _boom():
            raise AssertionError("DynamoDB touched without a token")

        monkeypatch.setattr(shared.db, "_dynamodb", _boom)
        r = client.post("/api/speakers", json={"yearId": "y", "name": "Ada"})
        assert r.status_code == 401

    def test_stale_cookie_falls_back_to_bearer(self, client: TestClient, admin_user):
        client.cookies.set("auth-token", make_token(admin_user, expired=True))
        r = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {make_token(admin_user)}"},
        )
        assert r.status_code == 200
        assert r.json()["user"]["id"] == admin_user["id"]

    def test_valid_cookie_wins_over_bad_bearer(self, client: TestClient, admin_user):
        client.cookies.set("auth-token", make_token(admin_user))
        r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-real-jwt"})
        assert r.status_code == 200

    def test_both_tokens_bad_returns_401(self, client: TestClient, admin_user):
        client.cookies.set("auth-token", "garbage")
        r = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {make_token(admin_user, expired=True)}"},
        )
        assert r.status_code == 401
        assert r.json()["detail"] == "Token expired"

    def test_invalid_token_returns_401(self, client: TestClient):
        r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-real-jwt"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid token"

    def test_expired_token_returns_401(self, client: TestClient, admin_user):
        token = make_token(admin_user, expired=True)
        r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Token expired"

    def test_wrong_secret_returns_401(self, client: TestClient, admin_user):
        token = make_token(admin_user, secret="some-other-secret-entirely-here")
        r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401

    def test_deleted_user_returns_401(self, client: TestClient, admin_user):
        from shared import repositories  # noqa: PLC0415

        token = make_token(admin_user)
        repositories.users.delete(admin_user["id"])
        r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401
        assert r.json()["detail"] == "User not found"

    def test_role_comes_from_the_users_table(self, client: TestClient, editor_user):
        # A token claiming ADMIN for an editor account is still an editor
        forged = make_token({**editor_user, "role": "ADMIN"}, secret=TEST_SECRET)
        r = client.get("/api/users", headers={"Authorization": f"Bearer {forged}"})
        assert r.status_code == 403
