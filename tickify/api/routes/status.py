from typing import Annotated

from fastapi import APIRouter, Depends

from tickify.core.config import Settings, get_settings
from tickify.models.schemas.status import StatusResponse
from tickify.repositories.status_repository import StatusRepository
from tickify.services.status_service import StatusService

router = APIRouter()


def get_status_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StatusService:
    return StatusService(
        repository=StatusRepository(),
        settings=settings,
    )


@router.get("/status", response_model=StatusResponse)
def service_status(
    status_service: Annotated[StatusService, Depends(get_status_service)],
) -> StatusResponse:
    return status_service.get_status()
