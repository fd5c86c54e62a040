import logging
from datetime import UTC, datetime
from typing import Any, NoReturn
from uuid import UUID

from fastapi import status
from psycopg import Connection
from psycopg.errors import ForeignKeyViolation

from tickify.core.database import get_connection
from tickify.core.errors import AppError, forbidden, not_found
from tickify.models.entities import TicketEntity, TicketStatus, UserEntity, UserSummary
from tickify.models.schemas.common import ListMeta
from tickify.models.schemas.ticket import (
    STAFF_ONLY_FIELDS,
    TicketCloseRequest,
    TicketCreateRequest,
    TicketListResponse,
    TicketRead,
    TicketUpdateRequest,
)
from tickify.models.schemas.user import UserSummaryRead
from tickify.repositories.ticket_repository import TicketRepository
from tickify.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

REOPENABLE_STATUSES: frozenset[str] = frozenset({"closed", "cancelled"})


def _to_summary_read(summary: UserSummary) -> UserSummaryRead:
    return UserSummaryRead(
        id=summary.id,
        username=summary.username,
        email=summary.email,
        first_name=summary.first_name,
        last_name=summary.last_name,
    )


def to_ticket_read(ticket: TicketEntity) -> TicketRead:
    return TicketRead(
        id=ticket.id,
        title=ticket.title,
        description=ticket.description,
        requester=_to_summary_read(ticket.requester),
        status=ticket.status,
        closed_by=_to_summary_read(ticket.closed_by) if ticket.closed_by else None,
        solution=ticket.solution,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
        closed_at=ticket.closed_at,
    )


class TicketService:
    def __init__(
        self,
        ticket_repository: TicketRepository,
        user_repository: UserRepository,
        database_url: str | None = None,
    ) -> None:
        self.ticket_repository = ticket_repository
        self.user_repository = user_repository
        self.database_url = database_url

    def create_ticket(self, payload: TicketCreateRequest, actor: UserEntity) -> TicketRead:
        title = self._validate_title(payload.title)
        description = self._validate_description(payload.description)

        with get_connection(self.database_url) as connection:
            requester_id = actor.id
            if actor.is_staff and payload.requester:
                requester = self.user_repository.get_by_username(
                    payload.requester.strip(), connection=connection
                )
                if requester is None:
                    raise AppError(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        code="INVALID_REQUESTER",
                        message="Requester does not exist.",
                        details={"requester": payload.requester},
                    )
                requester_id = requester.id

            ticket = self.ticket_repository.create(
                title=title,
                description=description,
                requester_id=requester_id,
                connection=connection,
            )

        logger.info("Ticket created: id=%s requester=%s", ticket.id, ticket.requester.username)
        return to_ticket_read(ticket)

    def count_tickets(self, actor: UserEntity) -> int:
        requester_id = None if actor.is_staff else actor.id
        return self.ticket_repository.count(requester_id=requester_id)

    def list_tickets(
        self,
        *,
        actor: UserEntity,
        requester_id: UUID | None,
        q: str | None,
        status: TicketStatus | None,
        page: int,
        page_size: int,
    ) -> TicketListResponse:
        if not actor.is_staff:
            # Plain users only ever see their own tickets, whatever filter they send.
            requester_id = actor.id

        normalized_q = q.strip() if q else None
        tickets, total = self.ticket_repository.list_filtered(
            requester_id=requester_id,
            q=normalized_q,
            status=status,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return TicketListResponse(
            data=[to_ticket_read(ticket) for ticket in tickets],
            meta=ListMeta(page=page, page_size=page_size, total=total),
        )

    def get_ticket(self, ticket_id: UUID, actor: UserEntity) -> TicketRead:
        return to_ticket_read(self.get_ticket_entity(ticket_id, actor))

    def get_ticket_entity(
        self,
        ticket_id: UUID,
        actor: UserEntity,
        connection: Connection | None = None,
    ) -> TicketEntity:
        ticket = self.ticket_repository.get_by_id(ticket_id, connection=connection)
        if ticket is None or not self._can_see(ticket, actor):
            self._raise_ticket_not_found(ticket_id)
        return ticket

    def update_ticket(
        self,
        ticket_id: UUID,
        payload: TicketUpdateRequest,
        actor: UserEntity,
    ) -> TicketRead:
        changes: dict[str, Any] = payload.changes()
        if not changes:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="NO_FIELDS_TO_UPDATE",
                message="No fields were provided to update.",
                details={"ticket_id": ticket_id},
            )

        restricted = sorted(STAFF_ONLY_FIELDS & changes.keys())
        if restricted and not actor.is_staff:
            raise forbidden(
                "STAFF_ROLE_REQUIRED",
                "Only administrators and moderators can change these fields.",
                fields=restricted,
            )

        if "title" in changes:
            changes["title"] = self._validate_title(changes["title"])
        if "description" in changes:
            changes["description"] = self._validate_description(changes["description"])
        if changes.get("solution") is not None:
            changes["solution"] = self._validate_solution(changes["solution"])

        with get_connection(self.database_url) as connection:
            current = self.get_ticket_entity(ticket_id, actor, connection=connection)

            if "requester" in changes:
                self._ensure_user_exists(changes["requester"], "INVALID_REQUESTER", connection)

            changes.update(self._closure_changes(current, changes, actor, connection))

            try:
                updated = self.ticket_repository.update(
                    ticket_id=ticket_id,
                    changes=changes,
                    connection=connection,
                )
            except ForeignKeyViolation as exc:
                raise AppError(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    code="INVALID_USER_REFERENCE",
                    message="Ticket references a user that does not exist.",
                    details={"ticket_id": ticket_id},
                ) from exc

            if updated is None:
                self._raise_ticket_not_found(ticket_id)

        logger.info("Ticket updated: id=%s fields=%s by=%s", ticket_id, sorted(changes), actor.username)
        return to_ticket_read(updated)

    def close_ticket(
        self,
        ticket_id: UUID,
        payload: TicketCloseRequest,
        actor: UserEntity,
    ) -> TicketRead:
        self._require_staff(actor)

        with get_connection(self.database_url) as connection:
            current = self.get_ticket_entity(ticket_id, actor, connection=connection)

            changes: dict[str, Any] = {}
            if current.status != "closed":
                changes.update(
                    status="closed",
                    closed_at=datetime.now(UTC),
                    closed_by=actor.id,
                )
            if payload.solution is not None:
                changes["solution"] = self._validate_solution(payload.solution)

            if not changes:
                return to_ticket_read(current)

            updated = self.ticket_repository.update(
                ticket_id=ticket_id,
                changes=changes,
                connection=connection,
            )
            if updated is None:
                self._raise_ticket_not_found(ticket_id)

        logger.info("Ticket closed: id=%s by=%s", ticket_id, actor.username)
        return to_ticket_read(updated)

    def reopen_ticket(self, ticket_id: UUID, actor: UserEntity) -> TicketRead:
        with get_connection(self.database_url) as connection:
            current = self.get_ticket_entity(ticket_id, actor, connection=connection)
            if current.status not in REOPENABLE_STATUSES:
                return to_ticket_read(current)

            updated = self.ticket_repository.update(
                ticket_id=ticket_id,
                changes={"status": "reopened", "closed_at": None, "closed_by": None},
                connection=connection,
            )
            if updated is None:
                self._raise_ticket_not_found(ticket_id)

        logger.info("Ticket reopened: id=%s by=%s", ticket_id, actor.username)
        return to_ticket_read(updated)

    def delete_ticket(self, ticket_id: UUID, actor: UserEntity) -> None:
        self._require_staff(actor)
        deleted = self.ticket_repository.delete(ticket_id)
        if not deleted:
            self._raise_ticket_not_found(ticket_id)
        logger.info("Ticket deleted: id=%s by=%s", ticket_id, actor.username)

    def _closure_changes(
        self,
        current: TicketEntity,
        changes: dict[str, Any],
        actor: UserEntity,
        connection: Connection | None,
    ) -> dict[str, Any]:
        """Keep closed_at/closed_by in step with the status the ticket ends up in."""
        target_status = changes.get("status", current.status)
        closed_by = changes.get("closed_by")

        if target_status != "closed":
            if closed_by is not None:
                raise AppError(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    code="INVALID_CLOSED_BY",
                    message="closed_by can only be set on a closed ticket.",
                    details={"status": target_status},
                )
            if current.status == "closed":
                return {"closed_at": None, "closed_by": None}
            changes.pop("closed_by", None)
            return {}

        if closed_by is not None:
            self._ensure_user_exists(closed_by, "INVALID_CLOSED_BY", connection)

        if current.status != "closed":
            return {"closed_at": datetime.now(UTC), "closed_by": closed_by or actor.id}

        if "closed_by" in changes and closed_by is None:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_CLOSED_BY",
                message="A closed ticket must keep its closed_by user.",
                details={"status": target_status},
            )
        return {}

    def _ensure_user_exists(
        self,
        user_id: UUID,
        code: str,
        connection: Connection | None,
    ) -> None:
        if self.user_repository.get_by_id(user_id, connection=connection) is None:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code=code,
                message="Referenced user does not exist.",
                details={"user_id": user_id},
            )

    def _can_see(self, ticket: TicketEntity, actor: UserEntity) -> bool:
        return actor.is_staff or ticket.requester.id == actor.id

    def _require_staff(self, actor: UserEntity) -> None:
        if not actor.is_staff:
            raise forbidden(
                "STAFF_ROLE_REQUIRED",
                "Only administrators and moderators can perform this action.",
            )

    def _validate_title(self, title: str) -> str:
        normalized = title.strip()
        if not 3 <= len(normalized) <= 50:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_TICKET_TITLE",
                message="Ticket title length must be between 3 and 50 characters.",
            )
        return normalized

    def _validate_description(self, description: str) -> str:
        normalized = description.strip()
        if not 10 <= len(normalized) <= 3000:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_TICKET_DESCRIPTION",
                message="Ticket description length must be between 10 and 3000 characters.",
            )
        return normalized

    def _validate_solution(self, solution: str) -> str:
        normalized = solution.strip()
        if not 10 <= len(normalized) <= 3000:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_TICKET_SOLUTION",
                message="Ticket solution length must be between 10 and 3000 characters.",
            )
        return normalized

    def _raise_ticket_not_found(self, ticket_id: UUID) -> NoReturn:
        raise not_found("TICKET_NOT_FOUND", "Ticket not found.", ticket_id=ticket_id)
