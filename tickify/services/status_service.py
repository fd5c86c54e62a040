from tickify.core.config import Settings
from tickify.models.schemas.status import StatusDependencies, StatusResponse
from tickify.repositories.status_repository import StatusRepository


class StatusService:
    def __init__(self, repository: StatusRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    def get_status(self) -> StatusResponse:
        database_status = self.repository.check_database(self.settings.database_url)
        status = "ok" if database_status.connected else "degraded"
        return StatusResponse(
            status=status,
            environment=self.settings.app_env,
            dependencies=StatusDependencies(database=database_status),
        )
