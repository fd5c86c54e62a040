import io

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from tickify.export.view import TicketView

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
LEFT_MARGIN = 50
TEXT_WIDTH = A4[0] - 2 * LEFT_MARGIN
LINE_HEIGHT = 14


def _draw_pair(
    pdf: canvas.Canvas,
    label: str,
    value: str,
    *,
    x: float,
    y: float,
    value_x: float,
    size: int = 12,
) -> None:
    pdf.setFont(BOLD_FONT, size)
    pdf.drawString(x, y, label)
    pdf.setFont(REGULAR_FONT, size)
    pdf.drawString(value_x, y, value)


def _draw_block(pdf: canvas.Canvas, text: str, *, y: float, size: int = 11) -> float:
    """Draw wrapped text starting at ``y`` and return the baseline below the last line."""
    pdf.setFont(REGULAR_FONT, size)
    for paragraph in text.splitlines() or [""]:
        for line in simpleSplit(paragraph, REGULAR_FONT, size, TEXT_WIDTH) or [""]:
            if y < LEFT_MARGIN:
                pdf.showPage()
                pdf.setFont(REGULAR_FONT, size)
                y = A4[1] - LEFT_MARGIN
            pdf.drawString(LEFT_MARGIN, y, line)
            y -= LINE_HEIGHT
    return y


def render_ticket_pdf(ticket: TicketView) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f"Ticket {ticket.id}")

    _draw_pair(pdf, "Updated at:", ticket.updated_at, x=400, y=820, value_x=460, size=10)

    pdf.setFont(REGULAR_FONT, 16)
    pdf.drawString(LEFT_MARGIN, 785, "Ticket")
    pdf.setFont(BOLD_FONT, 17)
    pdf.drawString(100, 785, ticket.id)

    _draw_pair(pdf, "Requester:", ticket.requester, x=LEFT_MARGIN, y=750, value_x=120)
    _draw_pair(pdf, "Status:", ticket.status, x=375, y=750, value_x=420)
    _draw_pair(pdf, "Title:", ticket.title, x=LEFT_MARGIN, y=720, value_x=86)
    _draw_pair(pdf, "Created at:", ticket.created_at, x=LEFT_MARGIN, y=700, value_x=120)

    pdf.setFont(BOLD_FONT, 12)
    pdf.drawString(LEFT_MARGIN, 675, "Description:")
    y = _draw_block(pdf, ticket.description, y=660)

    y = min(y - 20, 560)
    if y < 3 * LEFT_MARGIN:
        pdf.showPage()
        y = A4[1] - LEFT_MARGIN
    _draw_pair(pdf, "Closed by:", ticket.closed_by, x=LEFT_MARGIN, y=y, value_x=120)
    _draw_pair(pdf, "Closed at:", ticket.closed_at, x=375, y=y, value_x=440)

    pdf.setFont(BOLD_FONT, 12)
    pdf.drawString(LEFT_MARGIN, y - 20, "Solution:")
    _draw_block(pdf, ticket.solution, y=y - 36)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
