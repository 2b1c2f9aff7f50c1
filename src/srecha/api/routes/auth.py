"""Authentication endpoints."""

from fastapi import APIRouter, Depends

from srecha.api.dependencies import get_auth_service
from srecha.application.dto.requests import LoginRequest
from srecha.application.dto.responses import ErrorResponse, LoginResponse
from srecha.core.services import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Check a username and password."""
    principal = await service.login(request.username, request.password.get_secret_value())
    return LoginResponse.model_validate(principal)
