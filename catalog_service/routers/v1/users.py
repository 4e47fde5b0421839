"""
User management endpoints for API v1.

Every route requires an admin principal.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ...dependencies import get_auth_service, get_user_repository, require_admin
from ...exceptions import NotFoundException
from ...models import (
    MessageResponse,
    UserCreate,
    UserMessageResponse,
    UserResponse,
    UserUpdate,
)
from ...repositories import UserRepository
from ...services import AuthService

router = APIRouter(
    prefix="/api/users",
    tags=["User Management"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=List[UserResponse], summary="List users")
async def list_users(users: UserRepository = Depends(get_user_repository)):
    """Return every user without password hashes."""
    return [UserResponse.model_validate(user) for user in await users.get_all()]


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user by ID")
async def get_user(user_id: str, users: UserRepository = Depends(get_user_repository)):
    user = await users.find_by_id(user_id)
    if user is None:
        raise NotFoundException("User", user_id)
    return UserResponse.model_validate(user.to_public())


@router.post(
    "",
    response_model=UserMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Create a user, optionally with admin rights.

    Raises:
        ConflictException: If the email is already registered
    """
    user = await auth_service.create_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        is_admin=user_data.is_admin,
    )
    return UserMessageResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user.to_public()),
    )


@router.put("/{user_id}", response_model=UserMessageResponse, summary="Update a user")
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Merge-patch a user. Fields left out of the body keep their values.

    Raises:
        NotFoundException: If no user has this id
        ConflictException: If the new email belongs to another user
    """
    user = await auth_service.update_user(
        user_id, user_update.model_dump(exclude_unset=True)
    )
    return UserMessageResponse(
        message="User updated successfully",
        user=UserResponse.model_validate(user.to_public()),
    )


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user(user_id: str, users: UserRepository = Depends(get_user_repository)):
    if not await users.delete(user_id):
        raise NotFoundException("User", user_id)
    return MessageResponse(message="User deleted successfully", success=True)
