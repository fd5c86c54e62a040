from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from tickify.models.entities import UserRole


class LoginRequest(BaseModel):
    username: Annotated[str, Field(min_length=3, max_length=30)]
    password: Annotated[str, Field(min_length=8, max_length=100)]


class VerifyTokenRequest(BaseModel):
    token: Annotated[str, Field(min_length=1)]


class TokenRead(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int


class TokenDataResponse(BaseModel):
    data: TokenRead


class TokenVerification(BaseModel):
    valid: bool
    subject: str
    username: str
    role: UserRole
    expires_at: datetime


class TokenVerificationResponse(BaseModel):
    data: TokenVerification
