from pydantic import BaseModel


class MigrationPlan(BaseModel):
    current_revision: str | None = None
    head_revision: str | None = None
    pending: bool


class MigrationPlanResponse(BaseModel):
    data: MigrationPlan


class MigrationResult(BaseModel):
    message: str
    current_revision: str | None = None


class MigrationResultResponse(BaseModel):
    data: MigrationResult
