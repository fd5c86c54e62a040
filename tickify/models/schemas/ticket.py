from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from tickify.models.entities import TicketStatus
from tickify.models.schemas.common import ListMeta
from tickify.models.schemas.user import UserSummaryRead

Title = Annotated[str, Field(min_length=3, max_length=50)]
Description = Annotated[str, Field(min_length=10, max_length=3000)]
Solution = Annotated[str, Field(min_length=10, max_length=3000)]

# Fields only admins and moderators may change on an existing ticket.
STAFF_ONLY_FIELDS = frozenset({"status", "requester", "closed_by", "solution"})


class TicketCreateRequest(BaseModel):
    title: Title
    description: Description
    requester: str | None = Field(
        default=None,
        description="Username of the requester. Only honoured for admins and moderators.",
    )


class TicketUpdateRequest(BaseModel):
    title: Title | None = None
    description: Description | None = None
    status: TicketStatus | None = None
    requester: UUID | None = None
    closed_by: UUID | None = None
    solution: Solution | None = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "TicketUpdateRequest":
        for field in ("title", "description", "status", "requester"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class TicketCloseRequest(BaseModel):
    solution: Solution | None = None


class TicketRead(BaseModel):
    id: UUID
    title: str
    description: str
    requester: UserSummaryRead
    status: TicketStatus
    closed_by: UserSummaryRead | None = None
    solution: str | None = None
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None


class TicketDataResponse(BaseModel):
    data: TicketRead


class TicketListResponse(BaseModel):
    data: list[TicketRead]
    meta: ListMeta
