"""
Authentication and account use cases.

Signup, login, admin-side user creation and updates. Passwords are hashed with
bcrypt before they reach the repository. Duplicate-email checks and the create
or update that follows run under one lock, so two concurrent requests in this
process cannot register the same email.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..auth_gate import AuthGate
from ..config import Settings
from ..domain.entities import UserRecord
from ..exceptions import ConflictException, UnauthorizedException
from ..logging_config import get_logger
from ..metrics import track_login, track_signup
from ..repositories import UserRepository
from ..security import hash_password, verify_password

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: UserRecord
    token: str


class AuthService:
    """
    Service class for account operations.

    Args:
        settings: Provides the bcrypt cost factor
        users: User repository
        gate: Issues tokens for authenticated users
    """

    def __init__(self, settings: Settings, users: UserRepository, gate: AuthGate) -> None:
        self.users = users
        self.gate = gate
        self._hash_rounds = settings.PASSWORD_HASH_ROUNDS
        self._accounts_lock = asyncio.Lock()

    def _hash(self, password: str) -> str:
        return hash_password(password, rounds=self._hash_rounds)

    async def _create_unique(
        self, name: str, email: str, password: str, is_admin: bool
    ) -> UserRecord:
        password_hash = await asyncio.to_thread(self._hash, password)
        async with self._accounts_lock:
            if await self.users.find_by_email(email) is not None:
                raise ConflictException("User already exists", {"email": email})
            return await self.users.create(name, email, password_hash, is_admin=is_admin)

    async def sign_up(self, name: str, email: str, password: str) -> AuthResult:
        """
        Register a new, non-admin user and issue a token.

        Raises:
            ConflictException: If the email is already registered
        """
        try:
            user = await self._create_unique(name, email, password, is_admin=False)
        except ConflictException:
            logger.warning("Signup rejected, email already registered")
            track_signup(False)
            raise
        track_signup(True)
        logger.info("User signed up", user_id=user.id)
        return AuthResult(user=user, token=self.gate.issue_token(user.id))

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Check credentials and issue a token.

        Raises:
            UnauthorizedException: If the email is unknown or the password is wrong
        """
        user = await self.users.find_by_email(email)
        valid = user is not None and await asyncio.to_thread(
            verify_password, password, user.password
        )
        if not valid:
            track_login(False)
            logger.info("Login failed")
            raise UnauthorizedException("Invalid email or password")
        track_login(True)
        logger.info("User logged in", user_id=user.id)
        return AuthResult(user=user, token=self.gate.issue_token(user.id))

    async def create_user(
        self, name: str, email: str, password: str, is_admin: bool = False
    ) -> UserRecord:
        """
        Admin-side account creation.

        Raises:
            ConflictException: If the email is already registered
        """
        return await self._create_unique(name, email, password, is_admin=is_admin)

    async def update_user(self, user_id: str, fields: Mapping[str, Any]) -> UserRecord:
        """
        Merge-patch a user, hashing a supplied password.

        Raises:
            ConflictException: If the new email belongs to another user
            NotFoundException: If no user has this id
        """
        changes: Dict[str, Any] = dict(fields)
        if changes.get("password") is not None:
            changes["password"] = await asyncio.to_thread(self._hash, changes["password"])

        async with self._accounts_lock:
            email = changes.get("email")
            if email is not None:
                owner = await self.users.find_by_email(email)
                if owner is not None and owner.id != user_id:
                    raise ConflictException("Email already in use", {"email": email})
            return await self.users.update(user_id, changes)

    async def ensure_admin(self, name: str, email: str, password: str) -> UserRecord:
        """
        Make sure an admin account with this email exists.

        An existing account keeps its password and is promoted to admin.
        """
        existing = await self.users.find_by_email(email)
        if existing is not None:
            if existing.is_admin:
                return existing
            logger.info("Promoting bootstrap account to admin", user_id=existing.id)
            return await self.users.update(existing.id, {"is_admin": True})
        user = await self._create_unique(name, email, password, is_admin=True)
        logger.info("Bootstrap admin created", user_id=user.id)
        return user
