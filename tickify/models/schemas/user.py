from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from tickify.models.entities import UserRole, UserStatus
from tickify.models.schemas.common import ListMeta

Username = Annotated[str, Field(min_length=3, max_length=20)]
Password = Annotated[str, Field(min_length=8, max_length=100)]
PersonName = Annotated[str, Field(min_length=3, max_length=20)]


class RegisterRequest(BaseModel):
    username: Username
    email: EmailStr | None = None
    password: Password
    first_name: PersonName | None = None
    last_name: PersonName | None = None


class UserCreateRequest(RegisterRequest):
    role: UserRole = "user"
    status: UserStatus = "active"


class UserUpdateRequest(BaseModel):
    username: Username | None = None
    email: EmailStr | None = None
    password: Password | None = None
    first_name: PersonName | None = None
    last_name: PersonName | None = None
    role: UserRole | None = None
    status: UserStatus | None = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "UserUpdateRequest":
        for field in ("username", "password", "role", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class UserRead(BaseModel):
    id: UUID
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole
    status: UserStatus
    created_at: datetime
    updated_at: datetime


class UserSummaryRead(BaseModel):
    id: UUID
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserDataResponse(BaseModel):
    data: UserRead


class UserListResponse(BaseModel):
    data: list[UserRead]
    meta: ListMeta
