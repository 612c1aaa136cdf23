"""Tests for registration, login, logout and session handling."""

from datetime import datetime, timedelta

from conftest import STRONG_PASSWORD, registration

from app.models.user import UserSession


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok"}

    def test_unauthenticated_route(self, client):
        assert client.get("/unauthenticated").json() == {"outcome": "failure", "error": "unauthenticated"}


class TestRegister:
    def test_register_sets_session_cookie(self, client):
        response = client.post("/users/register", json=registration("ada@example.com"))

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "success"
        assert isinstance(data["userId"], int)
        assert "session_id" in response.cookies

    def test_duplicate_email(self, client):
        client.post("/users/register", json=registration("ada@example.com"))
        response = client.post("/users/register", json=registration("ada@example.com"))

        assert response.status_code == 409
        assert response.json() == {"outcome": "failure", "error": "user already exists"}

    def test_collects_all_reason_codes(self, client):
        form = registration("not-an-email", user_type="parent", first="A", last="B4")
        form.update(dob="yesterday", password="weak", confirm="other")

        response = client.post("/users/register", json=form)

        assert response.status_code == 400
        errors = response.json()["error"]
        for code in (
            "userTypeInvalid",
            "nameLength",
            "lastNameInvalid",
            "emailInvalid",
            "dobInvalid",
            "passwordStrength",
            "mismatchedPasswords",
        ):
            assert code in errors
        assert "firstNameInvalid" not in errors

    def test_long_password_rejected(self, client):
        form = registration("ada@example.com")
        form["password"] = form["confirm"] = "Aa1!" * 6

        response = client.post("/users/register", json=form)
        assert response.json()["error"] == ["passwordLength"]

    def test_long_email(self, client):
        form = registration("ada@example.com")
        form["email2"] = "a" * 95 + "@example.com"

        response = client.post("/users/register", json=form)
        assert response.json()["error"] == ["email2Length"]

    def test_hyphenated_names_allowed(self, client):
        response = client.post(
            "/users/register",
            json=registration("mary@example.com", first="Mary-Jane", last="Smith-Jones"),
        )
        assert response.json()["outcome"] == "success"


class TestLogin:
    def test_login(self, client):
        user_id = client.post("/users/register", json=registration("ada@example.com", "tutor")).json()["userId"]
        client.cookies.clear()

        response = client.post("/users/login", json={"email": "ada@example.com", "password": STRONG_PASSWORD})

        assert response.status_code == 200
        assert response.json() == {
            "outcome": "success",
            "userId": user_id,
            "userType": "tutor",
            "first": "Ada",
            "last": "Lovelace",
        }
        assert "session_id" in response.cookies

    def test_unknown_user(self, client):
        response = client.post("/users/login", json={"email": "nobody@example.com", "password": STRONG_PASSWORD})
        assert response.status_code == 401
        assert response.json()["error"] == "user not found"

    def test_wrong_password(self, client):
        client.post("/users/register", json=registration("ada@example.com"))
        response = client.post("/users/login", json={"email": "ada@example.com", "password": "Wr0ng!pass"})
        assert response.status_code == 401
        assert response.json()["error"] == "incorrect password"

    def test_invalid_input(self, client):
        response = client.post("/users/login", json={"email": "nope", "password": "short"})
        assert response.status_code == 400
        assert response.json()["error"] == ["emailInvalid", "passwordInvalid"]

    def test_rate_limited(self, client):
        body = {"email": "nobody@example.com", "password": STRONG_PASSWORD}
        statuses = [client.post("/users/login", json=body).status_code for _ in range(11)]
        assert statuses[:10] == [401] * 10
        assert statuses[10] == 429

    def test_registration_rate_limited(self, client):
        statuses = [
            client.post("/users/register", json=registration(f"user{n}@example.com")).status_code
            for n in range(11)
        ]
        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429


class TestSessions:
    def test_protected_route_requires_session(self, client):
        response = client.get("/messages/conversations")
        assert response.status_code == 401
        assert response.json() == {"outcome": "failure", "error": "unauthenticated"}

    def test_logout_ends_session(self, client):
        client.post("/users/register", json=registration("ada@example.com"))
        session_id = client.cookies.get("session_id")
        assert client.get("/messages/conversations").status_code == 200

        response = client.get("/users/logout")
        assert response.json() == {"outcome": "success", "loggedOut": True}

        client.cookies.set("session_id", session_id)
        assert client.get("/messages/conversations").status_code == 401

    def test_logout_without_session(self, client):
        assert client.get("/users/logout").json()["loggedOut"] is True

    def test_expired_session_is_rejected_and_removed(self, app, client):
        client.post("/users/register", json=registration("ada@example.com"))
        session_id = client.cookies.get("session_id")

        with app.state.session_factory() as db:
            record = db.get(UserSession, session_id)
            record.expires_at = datetime.utcnow() - timedelta(seconds=1)
            db.commit()

        assert client.get("/messages/conversations").status_code == 401
        with app.state.session_factory() as db:
            assert db.get(UserSession, session_id) is None

    def test_forged_cookie(self, client):
        client.cookies.set("session_id", "forged")
        assert client.get("/messages/conversations").status_code == 401
