import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from tickify.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be decoded, is expired or lacks claims."""


@dataclass(slots=True)
class TokenClaims:
    subject: str
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        logger.warning("Stored password hash could not be parsed: prefix=%s", hashed[:10])
        return False


def create_access_token(
    *,
    user_id: str,
    username: str,
    role: str,
    settings: Settings | None = None,
    expires_seconds: int | None = None,
) -> str:
    settings = settings or get_settings()
    now = datetime.now(UTC)
    lifetime = expires_seconds if expires_seconds is not None else settings.jwt_expiration_seconds
    payload: dict[str, Any] = {
        "sub": user_id,
        "username": username,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=lifetime)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> TokenClaims:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise InvalidTokenError("Token has expired.") from exc
    except JWTError as exc:
        raise InvalidTokenError("Token could not be decoded.") from exc

    subject = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    expires = payload.get("exp")
    if not subject or not username or not role or expires is None:
        raise InvalidTokenError("Token payload is missing required claims.")

    return TokenClaims(
        subject=str(subject),
        username=str(username),
        role=str(role),
        issued_at=datetime.fromtimestamp(int(payload.get("iat", 0)), UTC),
        expires_at=datetime.fromtimestamp(int(expires), UTC),
    )
