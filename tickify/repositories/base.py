from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from psycopg import Connection, sql

from tickify.core.database import get_connection


class Repository:
    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    @contextmanager
    def _use_connection(self, connection: Connection | None) -> Iterator[Connection]:
        if connection is not None:
            yield connection
            return
        with get_connection(self.database_url) as managed:
            yield managed


def build_assignments(
    changes: Mapping[str, Any],
    allowed_columns: frozenset[str],
) -> tuple[sql.Composed, list[Any]]:
    """Render ``col = %s, ...`` for whitelisted columns, always touching ``updated_at``."""
    unknown = set(changes) - allowed_columns
    if unknown:
        raise ValueError(f"Unsupported columns: {sorted(unknown)}")

    parts: list[sql.Composable] = []
    params: list[Any] = []
    for column, value in changes.items():
        parts.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
        params.append(value)
    parts.append(sql.SQL("updated_at = NOW()"))
    return sql.SQL(", ").join(parts), params
