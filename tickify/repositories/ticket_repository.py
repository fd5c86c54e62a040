from datetime import datetime
from typing import Any
from uuid import UUID

from psycopg import Connection, sql

from tickify.models.entities import TicketEntity, TicketStatus, UserSummary
from tickify.repositories.base import Repository, build_assignments

TICKET_SELECT = """
    SELECT
        t.id,
        t.title,
        t.description,
        t.status,
        t.solution,
        t.created_at,
        t.updated_at,
        t.closed_at,
        u.id AS requester_id,
        u.username AS requester_username,
        u.email AS requester_email,
        u.first_name AS requester_first_name,
        u.last_name AS requester_last_name,
        cb.id AS closed_by_id,
        cb.username AS closed_by_username,
        cb.email AS closed_by_email,
        cb.first_name AS closed_by_first_name,
        cb.last_name AS closed_by_last_name
    FROM tickets t
    JOIN users u ON u.id = t.requester
    LEFT JOIN users cb ON cb.id = t.closed_by
"""

UPDATABLE_COLUMNS = frozenset(
    {"title", "description", "status", "requester", "closed_by", "solution", "closed_at"}
)


def _to_user_summary(row: dict[str, Any], prefix: str) -> UserSummary | None:
    if row[f"{prefix}_id"] is None:
        return None
    return UserSummary(
        id=row[f"{prefix}_id"],
        username=row[f"{prefix}_username"],
        email=row[f"{prefix}_email"],
        first_name=row[f"{prefix}_first_name"],
        last_name=row[f"{prefix}_last_name"],
    )


def _to_ticket_entity(row: dict[str, Any]) -> TicketEntity:
    requester = _to_user_summary(row, "requester")
    if requester is None:
        raise RuntimeError(f"Ticket {row['id']} has no requester.")
    return TicketEntity(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        requester=requester,
        status=row["status"],
        closed_by=_to_user_summary(row, "closed_by"),
        solution=row["solution"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        closed_at=row["closed_at"],
    )


class TicketRepository(Repository):
    def create(
        self,
        *,
        title: str,
        description: str,
        requester_id: UUID,
        status: TicketStatus = "open",
        closed_by_id: UUID | None = None,
        solution: str | None = None,
        closed_at: datetime | None = None,
        connection: Connection | None = None,
    ) -> TicketEntity:
        query = """
            INSERT INTO tickets (title, description, requester, status, closed_by, solution, closed_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(
                    query,
                    (title, description, requester_id, status, closed_by_id, solution, closed_at),
                )
                created = cursor.fetchone()
            if created is None:
                raise RuntimeError("Failed to create ticket.")
            ticket = self.get_by_id(created["id"], connection=active_connection)
        if ticket is None:
            raise RuntimeError("Failed to load created ticket.")
        return ticket

    def get_by_id(
        self,
        ticket_id: UUID,
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        query = f"{TICKET_SELECT} WHERE t.id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (ticket_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_ticket_entity(row)

    def count(
        self,
        *,
        requester_id: UUID | None = None,
        connection: Connection | None = None,
    ) -> int:
        query = "SELECT COUNT(1) AS total FROM tickets"
        params: list[Any] = []
        if requester_id is not None:
            query += " WHERE requester = %s"
            params.append(requester_id)
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        return int(row["total"]) if row is not None else 0

    def list_filtered(
        self,
        *,
        requester_id: UUID | None,
        q: str | None,
        status: TicketStatus | None,
        limit: int,
        offset: int,
        connection: Connection | None = None,
    ) -> tuple[list[TicketEntity], int]:
        where_clauses: list[str] = []
        params: list[Any] = []

        if status is not None:
            where_clauses.append("t.status = %s")
            params.append(status)

        if requester_id is not None:
            where_clauses.append("t.requester = %s")
            params.append(requester_id)

        if q:
            where_clauses.append("(t.title ILIKE %s OR t.description ILIKE %s)")
            params.extend([f"%{q}%", f"%{q}%"])

        where_sql = ""
        if where_clauses:
            where_sql = "WHERE " + " AND ".join(where_clauses)

        list_query = f"""
            {TICKET_SELECT}
            {where_sql}
            ORDER BY t.created_at DESC, t.id
            LIMIT %s OFFSET %s
        """
        count_query = f"""
            SELECT COUNT(1) AS total
            FROM tickets t
            {where_sql}
        """

        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(count_query, params)
                count_row = cursor.fetchone()
                total = int(count_row["total"]) if count_row is not None else 0

                cursor.execute(list_query, [*params, limit, offset])
                rows = cursor.fetchall()

        return ([_to_ticket_entity(row) for row in rows], total)

    def update(
        self,
        *,
        ticket_id: UUID,
        changes: dict[str, Any],
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        assignments, params = build_assignments(changes, UPDATABLE_COLUMNS)
        query = sql.SQL("UPDATE tickets SET {assignments} WHERE id = %s RETURNING id").format(
            assignments=assignments,
        )
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, [*params, ticket_id])
                row = cursor.fetchone()
            if row is None:
                return None
            return self.get_by_id(ticket_id, connection=active_connection)

    def delete(self, ticket_id: UUID, connection: Connection | None = None) -> bool:
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute("DELETE FROM tickets WHERE id = %s", (ticket_id,))
                return cursor.rowcount > 0
