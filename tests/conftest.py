from collections.abc import Iterator
from pathlib import Path

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from tickify.main import app
from tickify.models.entities import UserEntity

from tests.helpers.fakes import make_user

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


@pytest.fixture
def client() -> Iterator[TestClient]:
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user() -> UserEntity:
    return make_user("admin", role="admin")


@pytest.fixture
def moderator_user() -> UserEntity:
    return make_user("moderator", role="moderator")


@pytest.fixture
def plain_user() -> UserEntity:
    return make_user("alice")
