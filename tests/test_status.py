from fastapi.testclient import TestClient
from tickify.api.routes.status import get_status_service
from tickify.core.config import Settings
from tickify.main import app
from tickify.models.schemas.status import DatabaseStatus, StatusDependencies, StatusResponse
from tickify.services.status_service import StatusService


class _HealthyService:
    def get_status(self) -> StatusResponse:
        return StatusResponse(
            status="ok",
            environment="test",
            dependencies=StatusDependencies(
                database=DatabaseStatus(
                    connected=True,
                    version="16.4",
                    max_connections=100,
                    opened_connections=7,
                )
            ),
        )


class _StubRepository:
    def __init__(self, database_status: DatabaseStatus) -> None:
        self.database_status = database_status
        self.checked_urls: list[str] = []

    def check_database(self, database_url: str) -> DatabaseStatus:
        self.checked_urls.append(database_url)
        return self.database_status


def test_status_ok(client: TestClient) -> None:
    app.dependency_overrides[get_status_service] = _HealthyService
    response = client.get("/api/v1/status")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "tickify-api"
    assert payload["dependencies"]["database"]["version"] == "16.4"
    assert payload["dependencies"]["database"]["opened_connections"] == 7


def test_status_service_reports_degraded_database() -> None:
    repository = _StubRepository(DatabaseStatus(connected=False, message="connection refused"))
    settings = Settings(app_env="staging", database_url="postgresql://db.invalid/tickify")

    result = StatusService(repository=repository, settings=settings).get_status()

    assert result.status == "degraded"
    assert result.environment == "staging"
    assert result.dependencies.database.message == "connection refused"
    assert repository.checked_urls == ["postgresql://db.invalid/tickify"]


def test_root(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Tickify API is running"}


class _BrokenService:
    def get_status(self) -> StatusResponse:
        raise RuntimeError("status probe exploded")


def test_unhandled_error_uses_error_envelope() -> None:
    app.dependency_overrides[get_status_service] = _BrokenService
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/v1/status")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    error = response.json()["error"]
    assert error["code"] == "INTERNAL_SERVER_ERROR"
    assert error["details"]["reason"] == "status probe exploded"
    assert "Traceback" not in response.text
