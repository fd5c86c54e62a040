from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


class DatabaseStatus(BaseModel):
    connected: bool
    version: str | None = None
    max_connections: int | None = None
    opened_connections: int | None = None
    message: str | None = None


class StatusDependencies(BaseModel):
    database: DatabaseStatus


class StatusResponse(BaseModel):
    status: Literal["ok", "degraded"]
    service: str = "tickify-api"
    environment: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    dependencies: StatusDependencies
