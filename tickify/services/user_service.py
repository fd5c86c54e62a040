import logging
from typing import Any, NoReturn
from uuid import UUID

from fastapi import status
from psycopg import Connection
from psycopg.errors import ForeignKeyViolation, UniqueViolation

from tickify.core.database import get_connection
from tickify.core.errors import AppError, conflict, forbidden, not_found
from tickify.core.security import hash_password
from tickify.models.entities import UserEntity, UserRole, UserStatus
from tickify.models.schemas.common import ListMeta
from tickify.models.schemas.user import (
    RegisterRequest,
    UserCreateRequest,
    UserListResponse,
    UserRead,
    UserUpdateRequest,
)
from tickify.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def to_user_read(user: UserEntity) -> UserRead:
    return UserRead(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        status=user.status,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserService:
    def __init__(
        self,
        user_repository: UserRepository,
        database_url: str | None = None,
    ) -> None:
        self.user_repository = user_repository
        self.database_url = database_url

    def register(self, payload: RegisterRequest) -> UserRead:
        """Self-service sign up. Always yields an active account with the ``user`` role."""
        return self._create(
            username=payload.username,
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role="user",
            status="active",
        )

    def create_superuser(self, payload: RegisterRequest) -> UserRead:
        """Create an active admin without an acting user, for bootstrapping a fresh install."""
        return self._create(
            username=payload.username,
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role="admin",
            status="active",
        )

    def create_user(self, payload: UserCreateRequest, actor: UserEntity) -> UserRead:
        if payload.role == "admin":
            self._require_admin(actor)
        return self._create(
            username=payload.username,
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            status=payload.status,
        )

    def count_users(self) -> int:
        return self.user_repository.count()

    def list_users(
        self,
        *,
        q: str | None,
        role: UserRole | None,
        status: UserStatus | None,
        page: int,
        page_size: int,
    ) -> UserListResponse:
        normalized_q = q.strip() if q else None
        users, total = self.user_repository.list_filtered(
            q=normalized_q,
            role=role,
            status=status,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return UserListResponse(
            data=[to_user_read(user) for user in users],
            meta=ListMeta(page=page, page_size=page_size, total=total),
        )

    def get_user(self, user_id: UUID) -> UserRead:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            self._raise_user_not_found(user_id)
        return to_user_read(user)

    def update_user(
        self,
        user_id: UUID,
        payload: UserUpdateRequest,
        actor: UserEntity,
    ) -> UserRead:
        changes: dict[str, Any] = payload.changes()
        if not changes:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="NO_FIELDS_TO_UPDATE",
                message="No fields were provided to update.",
                details={"user_id": user_id},
            )

        with get_connection(self.database_url) as connection:
            current = self.user_repository.get_by_id(user_id, connection=connection)
            if current is None:
                self._raise_user_not_found(user_id)

            if current.role == "admin" or changes.get("role") == "admin":
                self._require_admin(actor)

            if "username" in changes:
                changes["username"] = changes["username"].strip()
                self._ensure_username_available(
                    changes["username"], exclude_id=user_id, connection=connection
                )
            if changes.get("email") is not None:
                self._ensure_email_available(
                    changes["email"], exclude_id=user_id, connection=connection
                )
            if "password" in changes:
                changes["password_hash"] = hash_password(changes.pop("password"))

            try:
                updated = self.user_repository.update(
                    user_id=user_id,
                    changes=changes,
                    connection=connection,
                )
            except UniqueViolation as exc:
                self._raise_unique_conflict(exc)

            if updated is None:
                self._raise_user_not_found(user_id)

        logger.info("User updated: id=%s fields=%s", user_id, sorted(changes))
        return to_user_read(updated)

    def delete_user(self, user_id: UUID, actor: UserEntity) -> None:
        if user_id == actor.id:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="CANNOT_DELETE_SELF",
                message="You cannot delete your own account.",
                details={"user_id": user_id},
            )

        with get_connection(self.database_url) as connection:
            current = self.user_repository.get_by_id(user_id, connection=connection)
            if current is None:
                self._raise_user_not_found(user_id)
            if current.role == "admin":
                self._require_admin(actor)

            try:
                deleted = self.user_repository.delete(user_id, connection=connection)
            except ForeignKeyViolation as exc:
                raise conflict(
                    "USER_HAS_TICKETS",
                    "User is still referenced by tickets.",
                    user_id=user_id,
                ) from exc

            if not deleted:
                self._raise_user_not_found(user_id)

        logger.info("User deleted: id=%s by=%s", user_id, actor.username)

    def _create(
        self,
        *,
        username: str,
        email: str | None,
        password: str,
        first_name: str | None,
        last_name: str | None,
        role: UserRole,
        status: UserStatus,
    ) -> UserRead:
        username = username.strip()
        with get_connection(self.database_url) as connection:
            self._ensure_username_available(username, connection=connection)
            if email is not None:
                self._ensure_email_available(email, connection=connection)

            try:
                created = self.user_repository.create(
                    username=username,
                    email=email,
                    password_hash=hash_password(password),
                    first_name=first_name,
                    last_name=last_name,
                    role=role,
                    status=status,
                    connection=connection,
                )
            except UniqueViolation as exc:
                self._raise_unique_conflict(exc)

        logger.info("User created: id=%s username=%s role=%s", created.id, created.username, role)
        return to_user_read(created)

    def _ensure_username_available(
        self,
        username: str,
        *,
        exclude_id: UUID | None = None,
        connection: Connection | None = None,
    ) -> None:
        existing = self.user_repository.get_by_username(username, connection=connection)
        if existing is not None and existing.id != exclude_id:
            raise conflict(
                "USERNAME_TAKEN",
                "A user with this username already exists.",
                username=username,
            )

    def _ensure_email_available(
        self,
        email: str,
        *,
        exclude_id: UUID | None = None,
        connection: Connection | None = None,
    ) -> None:
        existing = self.user_repository.get_by_email(email, connection=connection)
        if existing is not None and existing.id != exclude_id:
            raise conflict(
                "EMAIL_TAKEN",
                "A user with this email already exists.",
                email=email,
            )

    def _require_admin(self, actor: UserEntity) -> None:
        if actor.role != "admin":
            raise forbidden(
                "ADMIN_ROLE_REQUIRED",
                "Only administrators can manage administrator accounts.",
            )

    def _raise_unique_conflict(self, exc: UniqueViolation) -> NoReturn:
        constraint = exc.diag.constraint_name or ""
        if "email" in constraint:
            raise conflict("EMAIL_TAKEN", "A user with this email already exists.") from exc
        raise conflict("USERNAME_TAKEN", "A user with this username already exists.") from exc

    def _raise_user_not_found(self, user_id: UUID) -> NoReturn:
        raise not_found("USER_NOT_FOUND", "User not found.", user_id=user_id)
