from dataclasses import dataclass

from psycopg import connect


@dataclass(slots=True)
class DatabaseFacts:
    version: str
    max_connections: int
    opened_connections: int


def inspect_database(
    database_url: str,
    timeout_seconds: int = 3,
) -> tuple[DatabaseFacts | None, str | None]:
    try:
        with connect(database_url, connect_timeout=timeout_seconds) as connection:
            with connection.cursor() as cursor:
                cursor.execute("SHOW server_version")
                version_row = cursor.fetchone()
                cursor.execute("SHOW max_connections")
                max_row = cursor.fetchone()
                cursor.execute(
                    "SELECT COUNT(*) FROM pg_stat_activity WHERE datname = current_database()"
                )
                opened_row = cursor.fetchone()
    except Exception as exc:
        return None, str(exc)

    if version_row is None or max_row is None or opened_row is None:
        return None, "Database status queries returned no rows."

    return (
        DatabaseFacts(
            version=str(version_row[0]),
            max_connections=int(max_row[0]),
            opened_connections=int(opened_row[0]),
        ),
        None,
    )
