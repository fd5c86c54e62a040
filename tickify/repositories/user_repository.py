from typing import Any
from uuid import UUID

from psycopg import Connection, sql

from tickify.models.entities import UserEntity, UserRole, UserStatus
from tickify.repositories.base import Repository, build_assignments

USER_COLUMNS = """
    id, username, email, password_hash, first_name, last_name,
    role, status, created_at, updated_at
"""

UPDATABLE_COLUMNS = frozenset(
    {"username", "email", "password_hash", "first_name", "last_name", "role", "status"}
)


def _to_user_entity(row: dict[str, Any]) -> UserEntity:
    return UserEntity(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        role=row["role"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserRepository(Repository):
    def create(
        self,
        *,
        username: str,
        password_hash: str,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        role: UserRole = "user",
        status: UserStatus = "active",
        connection: Connection | None = None,
    ) -> UserEntity:
        query = f"""
            INSERT INTO users (username, email, password_hash, first_name, last_name, role, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {USER_COLUMNS}
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(
                    query,
                    (username, email, password_hash, first_name, last_name, role, status),
                )
                created = cursor.fetchone()
        if created is None:
            raise RuntimeError("Failed to create user.")
        return _to_user_entity(created)

    def get_by_id(self, user_id: UUID, connection: Connection | None = None) -> UserEntity | None:
        return self._get_one("id", user_id, connection)

    def get_by_username(
        self,
        username: str,
        connection: Connection | None = None,
    ) -> UserEntity | None:
        return self._get_one("username", username, connection)

    def get_by_email(self, email: str, connection: Connection | None = None) -> UserEntity | None:
        return self._get_one("email", email, connection)

    def _get_one(
        self,
        column: str,
        value: Any,
        connection: Connection | None,
    ) -> UserEntity | None:
        query = sql.SQL("SELECT {columns} FROM users WHERE {column} = %s").format(
            columns=sql.SQL(USER_COLUMNS),
            column=sql.Identifier(column),
        )
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (value,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_user_entity(row)

    def count(self, connection: Connection | None = None) -> int:
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute("SELECT COUNT(1) AS total FROM users")
                row = cursor.fetchone()
        return int(row["total"]) if row is not None else 0

    def list_filtered(
        self,
        *,
        q: str | None,
        role: UserRole | None,
        status: UserStatus | None,
        limit: int,
        offset: int,
        connection: Connection | None = None,
    ) -> tuple[list[UserEntity], int]:
        where_clauses: list[str] = []
        params: list[Any] = []

        if role is not None:
            where_clauses.append("role = %s")
            params.append(role)

        if status is not None:
            where_clauses.append("status = %s")
            params.append(status)

        if q:
            where_clauses.append(
                "(username ILIKE %s OR email ILIKE %s OR first_name ILIKE %s OR last_name ILIKE %s)"
            )
            params.extend([f"%{q}%"] * 4)

        where_sql = ""
        if where_clauses:
            where_sql = "WHERE " + " AND ".join(where_clauses)

        list_query = f"""
            SELECT {USER_COLUMNS}
            FROM users
            {where_sql}
            ORDER BY created_at DESC, username
            LIMIT %s OFFSET %s
        """
        count_query = f"""
            SELECT COUNT(1) AS total
            FROM users
            {where_sql}
        """

        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(count_query, params)
                count_row = cursor.fetchone()
                total = int(count_row["total"]) if count_row is not None else 0

                cursor.execute(list_query, [*params, limit, offset])
                rows = cursor.fetchall()

        return ([_to_user_entity(row) for row in rows], total)

    def update(
        self,
        *,
        user_id: UUID,
        changes: dict[str, Any],
        connection: Connection | None = None,
    ) -> UserEntity | None:
        assignments, params = build_assignments(changes, UPDATABLE_COLUMNS)
        query = sql.SQL("UPDATE users SET {assignments} WHERE id = %s RETURNING {columns}").format(
            assignments=assignments,
            columns=sql.SQL(USER_COLUMNS),
        )
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, [*params, user_id])
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_user_entity(row)

    def delete(self, user_id: UUID, connection: Connection | None = None) -> bool:
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
                return cursor.rowcount > 0
