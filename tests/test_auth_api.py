from datetime import UTC, datetime, timedelta

from fastapi import status
from fastapi.testclient import TestClient
from tickify.api.deps import get_auth_service, get_current_user
from tickify.api.routes.users import get_user_service
from tickify.core.config import Settings
from tickify.core.errors import AppError
from tickify.core.security import create_access_token
from tickify.main import app
from tickify.models.entities import UserEntity
from tickify.models.schemas.auth import LoginRequest, TokenRead, TokenVerification
from tickify.models.schemas.user import RegisterRequest, UserRead
from tickify.services.auth_service import AuthService
from tickify.services.user_service import to_user_read

from tests.helpers.fakes import DEFAULT_PASSWORD, FakeUserRepository, make_user


class _FakeAuthService:
    def __init__(self) -> None:
        self.user = make_user("alice")

    def login(self, payload: LoginRequest) -> TokenRead:
        if payload.password != DEFAULT_PASSWORD:
            raise AppError(
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="INVALID_CREDENTIALS",
                message="Incorrect username or password.",
            )
        return TokenRead(access_token="signed.jwt.token", expires_in=3600)

    def verify(self, token: str) -> TokenVerification:
        if token != "signed.jwt.token":
            raise AppError(
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="INVALID_TOKEN",
                message="Invalid or expired token.",
            )
        return TokenVerification(
            valid=True,
            subject=str(self.user.id),
            username=self.user.username,
            role=self.user.role,
            expires_at=datetime.now(UTC) + timedelta(hours=1),
        )

    def authenticate(self, token: str) -> UserEntity:
        self.verify(token)
        return self.user


class _FakeUserService:
    def register(self, payload: RegisterRequest) -> UserRead:
        if payload.username == "alice":
            raise AppError(
                status_code=status.HTTP_409_CONFLICT,
                code="USERNAME_TAKEN",
                message="A user with this username already exists.",
            )
        return to_user_read(make_user(payload.username))


def test_login_returns_token(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "alice", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()["data"]
    assert payload["access_token"] == "signed.jwt.token"
    assert payload["token_type"] == "bearer"


def test_login_failure_uses_error_envelope(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "alice", "password": "wrong-password"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_login_validates_payload(client: TestClient) -> None:
    response = client.post("/api/v1/auth/login", json={"username": "al", "password": "short"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_register_creates_user(client: TestClient) -> None:
    app.dependency_overrides[get_user_service] = _FakeUserService
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "bobby", "password": "bobby-pass", "email": "bobby@example.com"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["username"] == "bobby"
    assert response.json()["data"]["role"] == "user"


def test_register_conflict(client: TestClient) -> None:
    app.dependency_overrides[get_user_service] = _FakeUserService
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "password": "alice-pass"},
    )

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"]["code"] == "USERNAME_TAKEN"


def test_register_rejects_invalid_email(client: TestClient) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "bobby", "password": "bobby-pass", "email": "not-an-email"},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_verify_token(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    ok = client.post("/api/v1/auth/verify", json={"token": "signed.jwt.token"})
    bad = client.post("/api/v1/auth/verify", json={"token": "forged"})

    assert ok.status_code == status.HTTP_200_OK
    assert ok.json()["data"]["valid"] is True
    assert ok.json()["data"]["username"] == "alice"
    assert bad.status_code == status.HTTP_401_UNAUTHORIZED
    assert bad.json()["error"]["code"] == "INVALID_TOKEN"


def test_me_requires_bearer_token(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.get("/api/v1/auth/me")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"]["code"] == "MISSING_TOKEN"


def test_me_resolves_bearer_token(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": "Bearer signed.jwt.token"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["username"] == "alice"
    assert "password_hash" not in response.json()["data"]


def test_me_with_overridden_user(client: TestClient, admin_user: UserEntity) -> None:
    app.dependency_overrides[get_current_user] = lambda: admin_user
    response = client.get("/api/v1/auth/me")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["role"] == "admin"


def test_me_rejects_deactivated_user(client: TestClient) -> None:
    settings = Settings(jwt_secret="api-test-secret")
    inactive = make_user("sleepy", status="inactive")
    auth_service = AuthService(user_repository=FakeUserRepository([inactive]), settings=settings)
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    token = create_access_token(
        user_id=str(inactive.id),
        username=inactive.username,
        role=inactive.role,
        settings=settings,
    )

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error"]["code"] == "USER_INACTIVE"
