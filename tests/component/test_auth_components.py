"""
Component tests for signup, login, logout and the current-user endpoint.

Each test runs through the FastAPI routes, the auth service, the user
repository (SQLite) and the token revocation store (fakeredis).
"""
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from storefront.data.models.user import UserModel
from tests.conftest import signup


class TestSignup:

    def test_signup_returns_token_and_user(self, test_client: TestClient):
        response = signup(test_client)

        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["name"] == "Ada"
        assert "password" not in data["user"]

    def test_password_is_stored_hashed(self, test_client: TestClient, db_session):
        signup(test_client, password="secret123")

        user = db_session.execute(select(UserModel)).scalar_one()
        assert user.password != "secret123"
        assert user.password.startswith("$2")

    def test_duplicate_email_rejected_without_new_record(self, test_client: TestClient, db_session):
        """
        Validates:
        - conflict error on an already registered email (case-insensitive)
        - only one user row exists afterwards
        """
        signup(test_client)
        response = signup(test_client, email="ADA@example.com", name="Other")

        assert response.status_code == 400
        assert response.json() == {"error": "Email already registered"}
        assert db_session.execute(select(func.count(UserModel.id))).scalar_one() == 1

    def test_missing_fields_rejected(self, test_client: TestClient):
        response = test_client.post("/api/signup", json={"email": "ada@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid or missing fields"


class TestLogin:

    def test_login_with_correct_credentials(self, test_client: TestClient):
        signup(test_client)

        response = test_client.post("/api/login", json={"email": "ada@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "ada@example.com"
        assert response.json()["token"]

    def test_wrong_password_and_unknown_email_look_the_same(self, test_client: TestClient):
        signup(test_client)

        wrong_password = test_client.post("/api/login", json={"email": "ada@example.com", "password": "nope-nope"})
        unknown_email = test_client.post("/api/login", json={"email": "bob@example.com", "password": "secret123"})

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


class TestSession:

    def test_current_user(self, test_client: TestClient, auth_headers):
        response = test_client.get("/api/user", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "ada@example.com"

    def test_current_user_without_token(self, test_client: TestClient):
        response = test_client.get("/api/user")

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}

    def test_logout_revokes_token(self, test_client: TestClient, auth_headers):
        response = test_client.post("/api/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        assert test_client.get("/api/user", headers=auth_headers).status_code == 401
