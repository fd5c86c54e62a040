from typing import Annotated

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tickify.core.config import Settings, get_settings
from tickify.core.errors import AppError, forbidden
from tickify.models.entities import UserEntity
from tickify.repositories.user_repository import UserRepository
from tickify.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(user_repository=UserRepository(), settings=settings)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserEntity:
    if credentials is None or not credentials.credentials:
        raise AppError(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="MISSING_TOKEN",
            message="A bearer token is required.",
        )
    return auth_service.authenticate(credentials.credentials)


def require_staff(
    current_user: Annotated[UserEntity, Depends(get_current_user)],
) -> UserEntity:
    if not current_user.is_staff:
        raise forbidden(
            "STAFF_ROLE_REQUIRED",
            "Only administrators and moderators can perform this action.",
        )
    return current_user


def require_admin(
    current_user: Annotated[UserEntity, Depends(get_current_user)],
) -> UserEntity:
    if current_user.role != "admin":
        raise forbidden("ADMIN_ROLE_REQUIRED", "Only administrators can perform this action.")
    return current_user


CurrentUser = Annotated[UserEntity, Depends(get_current_user)]
StaffUser = Annotated[UserEntity, Depends(require_staff)]
AdminUser = Annotated[UserEntity, Depends(require_admin)]
