"""Ticket export renderers."""

from tickify.export.csv_export import render_ticket_csv
from tickify.export.pdf_export import render_ticket_pdf
from tickify.export.view import TicketView, build_ticket_view

__all__ = ["TicketView", "build_ticket_view", "render_ticket_csv", "render_ticket_pdf"]
