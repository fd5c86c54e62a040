from uuid import UUID, uuid4

from fastapi import status
from fastapi.testclient import TestClient
from tickify.api.deps import get_current_user
from tickify.api.routes.users import get_user_service
from tickify.core.errors import AppError
from tickify.main import app
from tickify.models.entities import UserEntity
from tickify.models.schemas.common import ListMeta
from tickify.models.schemas.user import (
    UserCreateRequest,
    UserListResponse,
    UserRead,
    UserUpdateRequest,
)
from tickify.services.user_service import to_user_read

from tests.helpers.fakes import make_user


class _FakeUserService:
    def __init__(self) -> None:
        self.user = make_user("alice")
        self.deleted_ids: list[UUID] = []
        self.list_calls: list[dict[str, object]] = []

    def count_users(self) -> int:
        return 3

    def list_users(self, **filters: object) -> UserListResponse:
        self.list_calls.append(filters)
        return UserListResponse(
            data=[to_user_read(self.user)],
            meta=ListMeta(page=int(filters["page"]), page_size=int(filters["page_size"]), total=1),
        )

    def get_user(self, user_id: UUID) -> UserRead:
        if user_id != self.user.id:
            raise AppError(
                status_code=status.HTTP_404_NOT_FOUND,
                code="USER_NOT_FOUND",
                message="User not found.",
            )
        return to_user_read(self.user)

    def create_user(self, payload: UserCreateRequest, actor: UserEntity) -> UserRead:
        return to_user_read(make_user(payload.username, role=payload.role))

    def update_user(self, user_id: UUID, payload: UserUpdateRequest, actor: UserEntity) -> UserRead:
        return to_user_read(self.user).model_copy(update=payload.changes())

    def delete_user(self, user_id: UUID, actor: UserEntity) -> None:
        self.deleted_ids.append(user_id)


def _override(user: UserEntity) -> _FakeUserService:
    service = _FakeUserService()
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_user_service] = lambda: service
    return service


def test_plain_user_cannot_reach_user_management(
    client: TestClient,
    plain_user: UserEntity,
) -> None:
    _override(plain_user)
    response = client.get("/api/v1/users")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error"]["code"] == "STAFF_ROLE_REQUIRED"


def test_anonymous_request_is_unauthorized(client: TestClient) -> None:
    response = client.get("/api/v1/users/count")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"]["code"] == "MISSING_TOKEN"


def test_count_users(client: TestClient, moderator_user: UserEntity) -> None:
    _override(moderator_user)
    response = client.get("/api/v1/users/count")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"data": {"count": 3}}


def test_list_users_passes_filters(client: TestClient, admin_user: UserEntity) -> None:
    service = _override(admin_user)
    response = client.get(
        "/api/v1/users",
        params={"q": "ali", "role": "user", "page": 2, "page_size": 5},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["meta"] == {"page": 2, "page_size": 5, "total": 1}
    assert service.list_calls == [
        {"q": "ali", "role": "user", "status": None, "page": 2, "page_size": 5}
    ]


def test_list_users_rejects_unknown_role(client: TestClient, admin_user: UserEntity) -> None:
    _override(admin_user)
    response = client.get("/api/v1/users", params={"role": "superhero"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_get_user_not_found(client: TestClient, admin_user: UserEntity) -> None:
    _override(admin_user)
    response = client.get(f"/api/v1/users/{uuid4()}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


def test_create_user(client: TestClient, admin_user: UserEntity) -> None:
    _override(admin_user)
    response = client.post(
        "/api/v1/users",
        json={"username": "helper", "password": "helper-pass", "role": "moderator"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["role"] == "moderator"


def test_patch_user(client: TestClient, admin_user: UserEntity) -> None:
    service = _override(admin_user)
    response = client.patch(
        f"/api/v1/users/{service.user.id}",
        json={"status": "inactive"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["status"] == "inactive"


def test_patch_user_rejects_null_username(client: TestClient, admin_user: UserEntity) -> None:
    service = _override(admin_user)
    response = client.patch(f"/api/v1/users/{service.user.id}", json={"username": None})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_delete_user(client: TestClient, admin_user: UserEntity) -> None:
    service = _override(admin_user)
    target = uuid4()
    response = client.delete(f"/api/v1/users/{target}")

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert service.deleted_ids == [target]


def test_list_users_rejects_out_of_range_page(client: TestClient, admin_user: UserEntity) -> None:
    service = _override(admin_user)
    response = client.get("/api/v1/users", params={"page": 10**18})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert service.list_calls == []
