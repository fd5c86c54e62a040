"""Database repositories."""

from tickify.repositories.status_repository import StatusRepository
from tickify.repositories.ticket_repository import TicketRepository
from tickify.repositories.user_repository import UserRepository

__all__ = ["StatusRepository", "TicketRepository", "UserRepository"]
