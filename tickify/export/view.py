from dataclasses import dataclass
from datetime import datetime

from tickify.models.entities import TicketEntity, UserSummary

MISSING = "null"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(slots=True)
class TicketView:
    """A ticket flattened to the strings printed in exported documents."""

    id: str
    title: str
    description: str
    requester: str
    status: str
    closed_by: str
    solution: str
    created_at: str
    updated_at: str
    closed_at: str


def _format_timestamp(value: datetime | None) -> str:
    return value.strftime(TIMESTAMP_FORMAT) if value else MISSING


def _format_user(value: UserSummary | None) -> str:
    return value.username if value else MISSING


def build_ticket_view(ticket: TicketEntity) -> TicketView:
    return TicketView(
        id=str(ticket.id),
        title=ticket.title,
        description=ticket.description,
        requester=ticket.requester.username,
        status=ticket.status,
        closed_by=_format_user(ticket.closed_by),
        solution=ticket.solution or MISSING,
        created_at=_format_timestamp(ticket.created_at),
        updated_at=_format_timestamp(ticket.updated_at),
        closed_at=_format_timestamp(ticket.closed_at),
    )
