"""
Dependency functions for the catalog service.

Components are built once by the app factory and stored on `app.state`; these
functions hand them to routers and run the auth gate checks.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from .auth_gate import AuthGate
from .domain.entities import UserRecord
from .repositories import ProductRepository, UserRepository
from .services import AuthService


def get_auth_gate(request: Request) -> AuthGate:
    return request.app.state.auth_gate


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


def get_product_repository(request: Request) -> ProductRepository:
    return request.app.state.product_repository


async def require_authenticated(
    request: Request, authorization: Optional[str] = Header(None)
) -> str:
    """
    Dependency that resolves the principal from the Authorization header.

    The user id is also attached to `request.state.user_id` for downstream use.

    Raises:
        UnauthorizedException: If the token is missing or invalid
    """
    user_id = get_auth_gate(request).require_authenticated(authorization)
    request.state.user_id = user_id
    return user_id


async def require_admin(
    request: Request, user_id: str = Depends(require_authenticated)
) -> UserRecord:
    """
    Dependency that lets only admins through.

    Raises:
        UnauthorizedException: If the token is missing or invalid
        ForbiddenException: If the principal is not an admin
    """
    return await get_auth_gate(request).require_admin(user_id)


__all__ = [
    "get_auth_gate",
    "get_auth_service",
    "get_product_repository",
    "get_user_repository",
    "require_admin",
    "require_authenticated",
]
