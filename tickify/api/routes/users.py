from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from tickify.api.deps import StaffUser, require_staff
from tickify.models.entities import UserRole, UserStatus
from tickify.models.schemas.common import MAX_PAGE, CountRead, CountResponse
from tickify.models.schemas.user import (
    UserCreateRequest,
    UserDataResponse,
    UserListResponse,
    UserUpdateRequest,
)
from tickify.repositories.user_repository import UserRepository
from tickify.services.user_service import UserService

router = APIRouter(prefix="/users", dependencies=[Depends(require_staff)])


def get_user_service() -> UserService:
    return UserService(user_repository=UserRepository())


@router.get("/count", response_model=CountResponse)
def count_users(
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> CountResponse:
    return CountResponse(data=CountRead(count=user_service.count_users()))


@router.get("", response_model=UserListResponse)
def list_users(
    user_service: Annotated[UserService, Depends(get_user_service)],
    q: Annotated[str | None, Query()] = None,
    role: Annotated[UserRole | None, Query()] = None,
    status: Annotated[UserStatus | None, Query()] = None,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> UserListResponse:
    return user_service.list_users(
        q=q,
        role=role,
        status=status,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=UserDataResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    current_user: StaffUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserDataResponse:
    user = user_service.create_user(payload, actor=current_user)
    return UserDataResponse(data=user)


@router.get("/{user_id}", response_model=UserDataResponse)
def get_user(
    user_id: UUID,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserDataResponse:
    user = user_service.get_user(user_id)
    return UserDataResponse(data=user)


@router.patch("/{user_id}", response_model=UserDataResponse)
def update_user(
    user_id: UUID,
    payload: UserUpdateRequest,
    current_user: StaffUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserDataResponse:
    user = user_service.update_user(user_id, payload, actor=current_user)
    return UserDataResponse(data=user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID,
    current_user: StaffUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Response:
    user_service.delete_user(user_id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
