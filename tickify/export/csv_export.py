import csv
import io

from tickify.export.view import TicketView

CSV_HEADER = (
    "Ticket",
    "Updated at",
    "Requester",
    "Created at",
    "Status",
    "Title",
    "Description",
    "Closed by",
    "Closed at",
    "Solution",
)


def render_ticket_csv(ticket: TicketView) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerow(
        (
            ticket.id,
            ticket.updated_at,
            ticket.requester,
            ticket.created_at,
            ticket.status,
            ticket.title,
            ticket.description,
            ticket.closed_by,
            ticket.closed_at,
            ticket.solution,
        )
    )
    return buffer.getvalue().encode("utf-8")
