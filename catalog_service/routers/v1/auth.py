"""
Authentication endpoints for API v1.

Signup and login issue bearer tokens; `/me` resolves the caller's own record.
"""

from fastapi import APIRouter, Depends, status

from ...dependencies import get_auth_service, get_user_repository, require_authenticated
from ...exceptions import NotFoundException
from ...models import AuthResponse, UserLogin, UserResponse, UserSignUp
from ...repositories import UserRepository
from ...services import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
async def sign_up(
    user_data: UserSignUp,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user with name, email and password.

    New accounts are never admins. Returns a bearer token for immediate use.

    Raises:
        ConflictException: If the email is already registered
    """
    result = await auth_service.sign_up(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
    )
    return AuthResponse(
        message="User created successfully",
        token=result.token,
        user=UserResponse.model_validate(result.user.to_public()),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in user",
)
async def login(
    credentials: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Log in with email and password.

    Raises:
        UnauthorizedException: If the credentials do not match
    """
    result = await auth_service.sign_in(
        email=credentials.email,
        password=credentials.password,
    )
    return AuthResponse(
        message="Login successful",
        token=result.token,
        user=UserResponse.model_validate(result.user.to_public()),
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_current_user(
    user_id: str = Depends(require_authenticated),
    users: UserRepository = Depends(get_user_repository),
):
    """Return the authenticated user's public record."""
    user = await users.find_by_id(user_id)
    if user is None:
        raise NotFoundException("User", user_id)
    return UserResponse.model_validate(user.to_public())
