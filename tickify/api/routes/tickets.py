from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from tickify.api.deps import CurrentUser
from tickify.models.entities import TicketStatus
from tickify.models.schemas.common import MAX_PAGE, CountRead, CountResponse
from tickify.models.schemas.ticket import (
    TicketCloseRequest,
    TicketCreateRequest,
    TicketDataResponse,
    TicketListResponse,
    TicketUpdateRequest,
)
from tickify.repositories.ticket_repository import TicketRepository
from tickify.repositories.user_repository import UserRepository
from tickify.services.ticket_service import TicketService

router = APIRouter(prefix="/tickets")


def get_ticket_service() -> TicketService:
    return TicketService(
        ticket_repository=TicketRepository(),
        user_repository=UserRepository(),
    )


@router.get("/count", response_model=CountResponse)
def count_tickets(
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
) -> CountResponse:
    return CountResponse(data=CountRead(count=ticket_service.count_tickets(current_user)))


@router.get("", response_model=TicketListResponse)
def list_tickets(
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
    requester_id: Annotated[UUID | None, Query()] = None,
    q: Annotated[str | None, Query()] = None,
    status: Annotated[TicketStatus | None, Query()] = None,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> TicketListResponse:
    return ticket_service.list_tickets(
        actor=current_user,
        requester_id=requester_id,
        q=q,
        status=status,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=TicketDataResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(
    payload: TicketCreateRequest,
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketDataResponse:
    ticket = ticket_service.create_ticket(payload, actor=current_user)
    return TicketDataResponse(data=ticket)


@router.get("/{ticket_id}", response_model=TicketDataResponse)
def get_ticket(
    ticket_id: UUID,
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketDataResponse:
    ticket = ticket_service.get_ticket(ticket_id, actor=current_user)
    return TicketDataResponse(data=ticket)


@router.patch("/{ticket_id}", response_model=TicketDataResponse)
def update_ticket(
    ticket_id: UUID,
    payload: TicketUpdateRequest,
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketDataResponse:
    ticket = ticket_service.update_ticket(ticket_id, payload, actor=current_user)
    return TicketDataResponse(data=ticket)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(
    ticket_id: UUID,
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
) -> Response:
    ticket_service.delete_ticket(ticket_id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{ticket_id}/close", response_model=TicketDataResponse)
def close_ticket(
    ticket_id: UUID,
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
    payload: TicketCloseRequest | None = None,
) -> TicketDataResponse:
    ticket = ticket_service.close_ticket(
        ticket_id,
        payload or TicketCloseRequest(),
        actor=current_user,
    )
    return TicketDataResponse(data=ticket)


@router.patch("/{ticket_id}/reopen", response_model=TicketDataResponse)
def reopen_ticket(
    ticket_id: UUID,
    current_user: CurrentUser,
    ticket_service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketDataResponse:
    ticket = ticket_service.reopen_ticket(ticket_id, actor=current_user)
    return TicketDataResponse(data=ticket)
