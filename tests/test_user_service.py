import pytest
from fastapi import status
from tickify.core.errors import AppError
from tickify.core.security import verify_password
from tickify.models.entities import UserEntity
from tickify.models.schemas.user import RegisterRequest, UserCreateRequest, UserUpdateRequest
from tickify.services.user_service import UserService

from tests.helpers.fakes import FakeUserRepository, fake_connection, make_user


@pytest.fixture
def users(
    admin_user: UserEntity,
    moderator_user: UserEntity,
    plain_user: UserEntity,
) -> FakeUserRepository:
    return FakeUserRepository([admin_user, moderator_user, plain_user])


@pytest.fixture
def user_service(monkeypatch: pytest.MonkeyPatch, users: FakeUserRepository) -> UserService:
    monkeypatch.setattr("tickify.services.user_service.get_connection", fake_connection)
    return UserService(user_repository=users)


def test_register_forces_user_role_and_hashes_password(
    user_service: UserService,
    users: FakeUserRepository,
) -> None:
    created = user_service.register(
        RegisterRequest(username="  carol ", email="carol@example.com", password="s3cret-pass")
    )
    assert created.username == "carol"
    assert created.role == "user"
    assert created.status == "active"

    stored = users.store[created.id]
    assert stored.password_hash != "s3cret-pass"
    assert verify_password("s3cret-pass", stored.password_hash)


def test_register_rejects_duplicate_username(user_service: UserService) -> None:
    with pytest.raises(AppError) as exc:
        user_service.register(RegisterRequest(username="alice", password="another-pass"))
    assert exc.value.status_code == status.HTTP_409_CONFLICT
    assert exc.value.code == "USERNAME_TAKEN"


def test_register_rejects_duplicate_email(user_service: UserService) -> None:
    with pytest.raises(AppError) as exc:
        user_service.register(
            RegisterRequest(username="alice2", email="alice@example.com", password="another-pass")
        )
    assert exc.value.code == "EMAIL_TAKEN"


def test_moderator_cannot_create_admin(
    user_service: UserService,
    moderator_user: UserEntity,
) -> None:
    with pytest.raises(AppError) as exc:
        user_service.create_user(
            UserCreateRequest(username="root2", password="password123", role="admin"),
            actor=moderator_user,
        )
    assert exc.value.status_code == status.HTTP_403_FORBIDDEN
    assert exc.value.code == "ADMIN_ROLE_REQUIRED"


def test_admin_can_create_moderator(user_service: UserService, admin_user: UserEntity) -> None:
    created = user_service.create_user(
        UserCreateRequest(username="mod2", password="password123", role="moderator"),
        actor=admin_user,
    )
    assert created.role == "moderator"


def test_create_superuser_creates_active_admin(user_service: UserService) -> None:
    created = user_service.create_superuser(
        RegisterRequest(username="root", password="bootstrap-pass")
    )
    assert created.role == "admin"
    assert created.status == "active"


def test_list_users_filters_and_paginates(user_service: UserService) -> None:
    response = user_service.list_users(q=None, role="moderator", status=None, page=1, page_size=10)
    assert response.meta.total == 1
    assert response.data[0].username == "moderator"

    page = user_service.list_users(q=None, role=None, status=None, page=2, page_size=2)
    assert page.meta.total == 3
    assert len(page.data) == 1


def test_update_user_rehashes_password(
    user_service: UserService,
    users: FakeUserRepository,
    plain_user: UserEntity,
    admin_user: UserEntity,
) -> None:
    user_service.update_user(
        plain_user.id,
        UserUpdateRequest(password="brand-new-pass"),
        actor=admin_user,
    )
    assert verify_password("brand-new-pass", users.store[plain_user.id].password_hash)


def test_update_user_without_fields_is_rejected(
    user_service: UserService,
    plain_user: UserEntity,
    admin_user: UserEntity,
) -> None:
    with pytest.raises(AppError) as exc:
        user_service.update_user(plain_user.id, UserUpdateRequest(), actor=admin_user)
    assert exc.value.status_code == status.HTTP_400_BAD_REQUEST
    assert exc.value.code == "NO_FIELDS_TO_UPDATE"


def test_moderator_cannot_promote_to_admin(
    user_service: UserService,
    plain_user: UserEntity,
    moderator_user: UserEntity,
) -> None:
    with pytest.raises(AppError) as exc:
        user_service.update_user(
            plain_user.id,
            UserUpdateRequest(role="admin"),
            actor=moderator_user,
        )
    assert exc.value.code == "ADMIN_ROLE_REQUIRED"


def test_moderator_cannot_modify_admin(
    user_service: UserService,
    admin_user: UserEntity,
    moderator_user: UserEntity,
) -> None:
    with pytest.raises(AppError) as exc:
        user_service.update_user(
            admin_user.id,
            UserUpdateRequest(first_name="Mallory"),
            actor=moderator_user,
        )
    assert exc.value.code == "ADMIN_ROLE_REQUIRED"


def test_update_user_rejects_taken_username(
    user_service: UserService,
    plain_user: UserEntity,
    admin_user: UserEntity,
) -> None:
    with pytest.raises(AppError) as exc:
        user_service.update_user(
            plain_user.id,
            UserUpdateRequest(username="moderator"),
            actor=admin_user,
        )
    assert exc.value.code == "USERNAME_TAKEN"


def test_update_null_username_is_invalid() -> None:
    with pytest.raises(ValueError):
        UserUpdateRequest(username=None)


def test_delete_user_rules(
    user_service: UserService,
    users: FakeUserRepository,
    admin_user: UserEntity,
    moderator_user: UserEntity,
    plain_user: UserEntity,
) -> None:
    with pytest.raises(AppError) as self_delete:
        user_service.delete_user(admin_user.id, actor=admin_user)
    assert self_delete.value.code == "CANNOT_DELETE_SELF"

    with pytest.raises(AppError) as admin_delete:
        user_service.delete_user(admin_user.id, actor=moderator_user)
    assert admin_delete.value.code == "ADMIN_ROLE_REQUIRED"

    user_service.delete_user(plain_user.id, actor=moderator_user)
    assert plain_user.id not in users.store


def test_delete_user_with_tickets_conflicts(
    user_service: UserService,
    users: FakeUserRepository,
    admin_user: UserEntity,
) -> None:
    requester = users.add(make_user("dave"))
    users.referenced_ids.add(requester.id)

    with pytest.raises(AppError) as exc:
        user_service.delete_user(requester.id, actor=admin_user)
    assert exc.value.status_code == status.HTTP_409_CONFLICT
    assert exc.value.code == "USER_HAS_TICKETS"
