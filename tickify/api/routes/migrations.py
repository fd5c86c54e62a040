from typing import Annotated

from fastapi import APIRouter, Depends

from tickify.api.deps import require_admin
from tickify.core.config import Settings, get_settings
from tickify.core.errors import not_found
from tickify.models.schemas.migration import MigrationPlanResponse, MigrationResultResponse
from tickify.services.migration_service import MigrationService

router = APIRouter(prefix="/migrations")


def ensure_migrations_enabled(
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    if not settings.migrations_endpoint_enabled:
        raise not_found("NOT_FOUND", "Resource not found.")


def get_migration_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> MigrationService:
    return MigrationService(settings=settings)


# The enablement check runs first so a disabled endpoint answers 404 before any auth challenge.
guards = [Depends(ensure_migrations_enabled), Depends(require_admin)]


@router.get("", response_model=MigrationPlanResponse, dependencies=guards)
def migration_plan(
    migration_service: Annotated[MigrationService, Depends(get_migration_service)],
) -> MigrationPlanResponse:
    return MigrationPlanResponse(data=migration_service.plan())


@router.post("", response_model=MigrationResultResponse, dependencies=guards)
def run_migrations(
    migration_service: Annotated[MigrationService, Depends(get_migration_service)],
) -> MigrationResultResponse:
    return MigrationResultResponse(data=migration_service.upgrade())
