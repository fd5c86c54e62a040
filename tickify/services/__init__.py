"""Business services."""

from tickify.services.auth_service import AuthService
from tickify.services.export_service import ExportService
from tickify.services.migration_service import MigrationService
from tickify.services.status_service import StatusService
from tickify.services.ticket_service import TicketService
from tickify.services.user_service import UserService

__all__ = [
    "AuthService",
    "ExportService",
    "MigrationService",
    "StatusService",
    "TicketService",
    "UserService",
]
