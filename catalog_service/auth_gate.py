"""
Authentication and authorization gate.

Issues and verifies bearer tokens, resolves the principal (a user id) from an
Authorization header, and enforces the admin capability. The admin flag is read
from the user repository on every check, so revoking admin takes effect on the
next request.
"""

from typing import Optional

from .config import Settings
from .domain.entities import UserRecord
from .exceptions import ForbiddenException, UnauthorizedException
from .logging_config import get_logger
from .repositories import UserRepository
from .security import create_access_token, decode_access_token, get_token_from_header

logger = get_logger(__name__)


class AuthGate:
    """
    Token issue/verify plus the authenticated and admin checks.

    Args:
        settings: Provides the signing secret, algorithm and token lifetime
        users: Repository consulted for the admin flag
    """

    def __init__(self, settings: Settings, users: UserRepository) -> None:
        self._secret_key = settings.JWT_SECRET_KEY
        self._algorithm = settings.JWT_ALGORITHM
        self._expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.users = users

    def issue_token(self, user_id: str) -> str:
        return create_access_token(
            user_id,
            self._secret_key,
            algorithm=self._algorithm,
            expire_minutes=self._expire_minutes,
        )

    def verify(self, token: str) -> Optional[str]:
        """Return the user id embedded in a valid token, None otherwise."""
        payload = decode_access_token(token, self._secret_key, algorithm=self._algorithm)
        if payload is None:
            return None
        return payload["sub"]

    def require_authenticated(self, authorization: Optional[str]) -> str:
        """
        Resolve the principal from an Authorization header value.

        Raises:
            UnauthorizedException: If the header is missing, malformed or the
                token does not verify
        """
        if not authorization:
            raise UnauthorizedException("No token provided")

        token = get_token_from_header(authorization)
        if token is None:
            raise UnauthorizedException(
                "Invalid authorization header format. Use: Bearer <token>"
            )

        user_id = self.verify(token)
        if user_id is None:
            raise UnauthorizedException("Invalid or expired token")
        return user_id

    async def require_admin(self, user_id: str) -> UserRecord:
        """
        Load the principal's record and check its admin flag.

        Raises:
            ForbiddenException: If the user no longer exists or is not an admin
        """
        user = await self.users.find_by_id(user_id)
        if user is None or not user.is_admin:
            logger.warning("Admin access denied", user_id=user_id)
            raise ForbiddenException("Admin access required")
        return user
