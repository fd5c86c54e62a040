"""Domain models and API schemas."""

from tickify.models.entities import (
    STAFF_ROLES,
    TicketEntity,
    TicketStatus,
    UserEntity,
    UserRole,
    UserStatus,
    UserSummary,
)

__all__ = [
    "STAFF_ROLES",
    "TicketEntity",
    "TicketStatus",
    "UserEntity",
    "UserRole",
    "UserStatus",
    "UserSummary",
]
