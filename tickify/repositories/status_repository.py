from tickify.core.db import inspect_database
from tickify.models.schemas.status import DatabaseStatus


class StatusRepository:
    def check_database(self, database_url: str) -> DatabaseStatus:
        facts, error_message = inspect_database(database_url)
        if facts is None:
            return DatabaseStatus(connected=False, message=error_message)
        return DatabaseStatus(
            connected=True,
            version=facts.version,
            max_connections=facts.max_connections,
            opened_connections=facts.opened_connections,
        )
