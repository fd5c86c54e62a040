import pytest
from tickify.cli import create_superuser
from tickify.models.entities import UserEntity

from tests.helpers.fakes import FakeUserRepository, fake_connection


@pytest.fixture
def users(monkeypatch: pytest.MonkeyPatch, plain_user: UserEntity) -> FakeUserRepository:
    repository = FakeUserRepository([plain_user])
    monkeypatch.setattr("tickify.services.user_service.get_connection", fake_connection)
    monkeypatch.setattr(create_superuser, "UserRepository", lambda: repository)
    return repository


def test_creates_active_admin(users: FakeUserRepository) -> None:
    exit_code = create_superuser.main(
        ["--username", "root", "--password", "bootstrap-pass", "--email", "root@example.com"]
    )

    assert exit_code == 0
    created = users.get_by_username("root")
    assert created is not None
    assert created.role == "admin"
    assert created.status == "active"
    assert created.email == "root@example.com"
    assert created.password_hash != "bootstrap-pass"


def test_invalid_input_returns_error_code(users: FakeUserRepository) -> None:
    exit_code = create_superuser.main(["--username", "ro", "--password", "short"])

    assert exit_code == 1
    assert users.count() == 1


def test_duplicate_username_returns_error_code(users: FakeUserRepository) -> None:
    exit_code = create_superuser.main(["--username", "alice", "--password", "bootstrap-pass"])

    assert exit_code == 1
    assert users.get_by_username("alice").role == "user"


def test_prompts_for_missing_password(
    monkeypatch: pytest.MonkeyPatch,
    users: FakeUserRepository,
) -> None:
    monkeypatch.setattr(create_superuser.getpass, "getpass", lambda _prompt: "prompted-pass")

    assert create_superuser.main(["--username", "root"]) == 0
    assert users.get_by_username("root") is not None


def test_username_is_required() -> None:
    with pytest.raises(SystemExit) as exc:
        create_superuser.main([])
    assert exc.value.code == 2
