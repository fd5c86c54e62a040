from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from tickify.api.deps import CurrentUser
from tickify.repositories.ticket_repository import TicketRepository
from tickify.services.export_service import ExportedFile, ExportService

router = APIRouter(prefix="/export")


def get_export_service() -> ExportService:
    return ExportService(ticket_repository=TicketRepository())


def _attachment(exported: ExportedFile) -> Response:
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get("/pdf/ticket/{ticket_id}", response_class=Response)
def export_ticket_pdf(
    ticket_id: UUID,
    current_user: CurrentUser,
    export_service: Annotated[ExportService, Depends(get_export_service)],
) -> Response:
    return _attachment(export_service.ticket_pdf(ticket_id, actor=current_user))


@router.get("/csv/ticket/{ticket_id}", response_class=Response)
def export_ticket_csv(
    ticket_id: UUID,
    current_user: CurrentUser,
    export_service: Annotated[ExportService, Depends(get_export_service)],
) -> Response:
    return _attachment(export_service.ticket_csv(ticket_id, actor=current_user))
