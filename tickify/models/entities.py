from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

UserRole = Literal["user", "moderator", "admin"]
UserStatus = Literal["active", "inactive"]
TicketStatus = Literal["open", "inprogress", "closed", "reopened", "paused", "cancelled"]

STAFF_ROLES: frozenset[str] = frozenset({"admin", "moderator"})


@dataclass(slots=True)
class UserEntity:
    id: UUID
    username: str
    email: str | None
    password_hash: str
    first_name: str | None
    last_name: str | None
    role: UserRole
    status: UserStatus
    created_at: datetime
    updated_at: datetime

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_active(self) -> bool:
        return self.status == "active"


@dataclass(slots=True)
class UserSummary:
    id: UUID
    username: str
    email: str | None
    first_name: str | None
    last_name: str | None


@dataclass(slots=True)
class TicketEntity:
    id: UUID
    title: str
    description: str
    requester: UserSummary
    status: TicketStatus
    closed_by: UserSummary | None
    solution: str | None
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None
