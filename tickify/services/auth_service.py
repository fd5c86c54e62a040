import logging
from typing import NoReturn
from uuid import UUID

from fastapi import status

from tickify.core.config import Settings
from tickify.core.errors import AppError, forbidden
from tickify.core.security import (
    InvalidTokenError,
    TokenClaims,
    create_access_token,
    decode_access_token,
    verify_password,
)
from tickify.models.entities import UserEntity
from tickify.models.schemas.auth import LoginRequest, TokenRead, TokenVerification
from tickify.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Password login, token verification and bearer-token resolution."""

    def __init__(self, user_repository: UserRepository, settings: Settings) -> None:
        self.user_repository = user_repository
        self.settings = settings

    def login(self, payload: LoginRequest) -> TokenRead:
        user = self.user_repository.get_by_username(payload.username.strip())
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.warning("Failed login for username=%s", payload.username)
            raise AppError(
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="INVALID_CREDENTIALS",
                message="Incorrect username or password.",
            )
        self._ensure_active(user)

        token = create_access_token(
            user_id=str(user.id),
            username=user.username,
            role=user.role,
            settings=self.settings,
        )
        logger.info("Login successful for username=%s", user.username)
        return TokenRead(access_token=token, expires_in=self.settings.jwt_expiration_seconds)

    def verify(self, token: str) -> TokenVerification:
        claims = self._decode(token)
        return TokenVerification(
            valid=True,
            subject=claims.subject,
            username=claims.username,
            role=claims.role,
            expires_at=claims.expires_at,
        )

    def authenticate(self, token: str) -> UserEntity:
        """Resolve a bearer token to the active user it was issued for."""
        claims = self._decode(token)
        try:
            user_id = UUID(claims.subject)
        except ValueError:
            self._raise_invalid_token("Token subject is not a user id.")

        user = self.user_repository.get_by_id(user_id)
        if user is None:
            self._raise_invalid_token("Token refers to an unknown user.")
        self._ensure_active(user)
        return user

    def _decode(self, token: str) -> TokenClaims:
        try:
            return decode_access_token(token, settings=self.settings)
        except InvalidTokenError as exc:
            logger.info("Rejected bearer token: %s", exc)
            self._raise_invalid_token(str(exc))

    def _ensure_active(self, user: UserEntity) -> None:
        if not user.is_active:
            raise forbidden("USER_INACTIVE", "User account is inactive.", user_id=user.id)

    def _raise_invalid_token(self, reason: str) -> NoReturn:
        raise AppError(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="INVALID_TOKEN",
            message="Invalid or expired token.",
            details={"reason": reason},
        )
