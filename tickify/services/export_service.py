import logging
from dataclasses import dataclass
from uuid import UUID

from tickify.core.errors import not_found
from tickify.export import build_ticket_view, render_ticket_csv, render_ticket_pdf
from tickify.models.entities import TicketEntity, UserEntity
from tickify.repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExportedFile:
    filename: str
    media_type: str
    content: bytes


class ExportService:
    def __init__(self, ticket_repository: TicketRepository) -> None:
        self.ticket_repository = ticket_repository

    def ticket_pdf(self, ticket_id: UUID, actor: UserEntity) -> ExportedFile:
        ticket = self._get_exportable_ticket(ticket_id, actor)
        content = render_ticket_pdf(build_ticket_view(ticket))
        logger.info("Ticket exported: id=%s format=pdf by=%s", ticket_id, actor.username)
        return ExportedFile(
            filename=f"Ticket-{ticket.id}.pdf",
            media_type="application/pdf",
            content=content,
        )

    def ticket_csv(self, ticket_id: UUID, actor: UserEntity) -> ExportedFile:
        ticket = self._get_exportable_ticket(ticket_id, actor)
        content = render_ticket_csv(build_ticket_view(ticket))
        logger.info("Ticket exported: id=%s format=csv by=%s", ticket_id, actor.username)
        return ExportedFile(
            filename=f"Ticket-{ticket.id}.csv",
            media_type="text/csv",
            content=content,
        )

    def _get_exportable_ticket(self, ticket_id: UUID, actor: UserEntity) -> TicketEntity:
        ticket = self.ticket_repository.get_by_id(ticket_id)
        if ticket is None or not (actor.is_staff or ticket.requester.id == actor.id):
            raise not_found("TICKET_NOT_FOUND", "Ticket not found.", ticket_id=ticket_id)
        return ticket
