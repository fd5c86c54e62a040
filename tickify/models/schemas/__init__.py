"""Pydantic schema definitions."""

from tickify.models.schemas.auth import (
    LoginRequest,
    TokenDataResponse,
    TokenRead,
    TokenVerification,
    TokenVerificationResponse,
    VerifyTokenRequest,
)
from tickify.models.schemas.common import CountRead, CountResponse, ListMeta
from tickify.models.schemas.migration import (
    MigrationPlan,
    MigrationPlanResponse,
    MigrationResult,
    MigrationResultResponse,
)
from tickify.models.schemas.status import DatabaseStatus, StatusDependencies, StatusResponse
from tickify.models.schemas.ticket import (
    TicketCloseRequest,
    TicketCreateRequest,
    TicketDataResponse,
    TicketListResponse,
    TicketRead,
    TicketUpdateRequest,
)
from tickify.models.schemas.user import (
    RegisterRequest,
    UserCreateRequest,
    UserDataResponse,
    UserListResponse,
    UserRead,
    UserSummaryRead,
    UserUpdateRequest,
)

__all__ = [
    "CountRead",
    "CountResponse",
    "DatabaseStatus",
    "ListMeta",
    "LoginRequest",
    "MigrationPlan",
    "MigrationPlanResponse",
    "MigrationResult",
    "MigrationResultResponse",
    "RegisterRequest",
    "StatusDependencies",
    "StatusResponse",
    "TicketCloseRequest",
    "TicketCreateRequest",
    "TicketDataResponse",
    "TicketListResponse",
    "TicketRead",
    "TicketUpdateRequest",
    "TokenDataResponse",
    "TokenRead",
    "TokenVerification",
    "TokenVerificationResponse",
    "UserCreateRequest",
    "UserDataResponse",
    "UserListResponse",
    "UserRead",
    "UserSummaryRead",
    "UserUpdateRequest",
    "VerifyTokenRequest",
]
