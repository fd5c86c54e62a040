from typing import Annotated

from fastapi import APIRouter, Depends, status

from tickify.api.deps import CurrentUser, get_auth_service
from tickify.api.routes.users import get_user_service
from tickify.models.schemas.auth import (
    LoginRequest,
    TokenDataResponse,
    TokenVerificationResponse,
    VerifyTokenRequest,
)
from tickify.models.schemas.user import RegisterRequest, UserDataResponse
from tickify.services.auth_service import AuthService
from tickify.services.user_service import UserService, to_user_read

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=TokenDataResponse)
def login(
    payload: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenDataResponse:
    return TokenDataResponse(data=auth_service.login(payload))


@router.post("/register", response_model=UserDataResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserDataResponse:
    return UserDataResponse(data=user_service.register(payload))


@router.post("/verify", response_model=TokenVerificationResponse)
def verify_token(
    payload: VerifyTokenRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenVerificationResponse:
    return TokenVerificationResponse(data=auth_service.verify(payload.token))


@router.get("/me", response_model=UserDataResponse)
def me(current_user: CurrentUser) -> UserDataResponse:
    return UserDataResponse(data=to_user_read(current_user))
