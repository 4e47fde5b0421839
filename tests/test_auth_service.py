"""
Tests for the account service.

Signup, login, admin-side creation and updates, and the bootstrap admin, all
against real JSON files.
"""

import asyncio

import pytest

from catalog_service.exceptions import (
    ConflictException,
    NotFoundException,
    UnauthorizedException,
)
from catalog_service.security import verify_password


class TestSignUp:
    """Test self-service registration."""

    @pytest.mark.asyncio
    async def test_signup_then_login_resolves_same_user(self, auth_service, auth_gate):
        signed_up = await auth_service.sign_up("Ana", "a@x.com", "Password123")
        logged_in = await auth_service.sign_in("a@x.com", "Password123")

        assert logged_in.user.id == signed_up.user.id
        assert auth_gate.verify(signed_up.token) == signed_up.user.id
        assert auth_gate.verify(logged_in.token) == signed_up.user.id

    @pytest.mark.asyncio
    async def test_signup_is_never_admin(self, auth_service):
        result = await auth_service.sign_up("Ana", "a@x.com", "Password123")

        assert result.user.is_admin is False

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, auth_service, user_repo):
        await auth_service.sign_up("Ana", "a@x.com", "Password123")

        stored = await user_repo.find_by_email("a@x.com")

        assert stored.password != "Password123"
        assert stored.password.startswith("$2b$")
        assert verify_password("Password123", stored.password)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, auth_service, user_repo):
        await auth_service.sign_up("Ana", "a@x.com", "Password123")

        with pytest.raises(ConflictException, match="User already exists"):
            await auth_service.sign_up("Other", "a@x.com", "Password456")

        assert len(await user_repo.get_all()) == 1

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_signups_create_one_user(
        self, auth_service, user_repo
    ):
        results = await asyncio.gather(
            auth_service.sign_up("Ana", "a@x.com", "Password123"),
            auth_service.sign_up("Ana", "a@x.com", "Password123"),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, ConflictException)]
        assert len(conflicts) == 1
        assert len(await user_repo.get_all()) == 1


class TestSignIn:
    """Test credential checks."""

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service):
        await auth_service.sign_up("Ana", "a@x.com", "Password123")

        with pytest.raises(UnauthorizedException, match="Invalid email or password"):
            await auth_service.sign_in("a@x.com", "WrongPassword")

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service):
        with pytest.raises(UnauthorizedException, match="Invalid email or password"):
            await auth_service.sign_in("nobody@x.com", "Password123")


class TestAdminOperations:
    """Test admin-side account management."""

    @pytest.mark.asyncio
    async def test_create_admin_user(self, auth_service):
        user = await auth_service.create_user("Root", "root@x.com", "Password123", is_admin=True)

        assert user.is_admin is True

    @pytest.mark.asyncio
    async def test_create_duplicate_conflicts(self, auth_service):
        await auth_service.create_user("Root", "root@x.com", "Password123")

        with pytest.raises(ConflictException):
            await auth_service.create_user("Root", "root@x.com", "Password123")

    @pytest.mark.asyncio
    async def test_update_hashes_new_password(self, auth_service):
        user = await auth_service.create_user("Ana", "a@x.com", "Password123")

        updated = await auth_service.update_user(user.id, {"password": "NewPassword456"})

        assert updated.password != "NewPassword456"
        assert (await auth_service.sign_in("a@x.com", "NewPassword456")).user.id == user.id

    @pytest.mark.asyncio
    async def test_update_to_taken_email_conflicts(self, auth_service):
        await auth_service.create_user("Ana", "a@x.com", "Password123")
        bo = await auth_service.create_user("Bo", "b@x.com", "Password123")

        with pytest.raises(ConflictException, match="Email already in use"):
            await auth_service.update_user(bo.id, {"email": "a@x.com"})

    @pytest.mark.asyncio
    async def test_update_to_own_email_is_allowed(self, auth_service):
        ana = await auth_service.create_user("Ana", "a@x.com", "Password123")

        updated = await auth_service.update_user(ana.id, {"email": "a@x.com", "name": "A"})

        assert updated.name == "A"

    @pytest.mark.asyncio
    async def test_update_missing_user(self, auth_service):
        with pytest.raises(NotFoundException):
            await auth_service.update_user("ghost", {"name": "X"})


class TestEnsureAdmin:
    """Test the bootstrap admin account."""

    @pytest.mark.asyncio
    async def test_creates_admin(self, auth_service):
        admin = await auth_service.ensure_admin("Root", "root@x.com", "Password123")

        assert admin.is_admin is True
        assert (await auth_service.sign_in("root@x.com", "Password123")).user.id == admin.id

    @pytest.mark.asyncio
    async def test_is_idempotent(self, auth_service, user_repo):
        first = await auth_service.ensure_admin("Root", "root@x.com", "Password123")
        second = await auth_service.ensure_admin("Root", "root@x.com", "Password123")

        assert first == second
        assert len(await user_repo.get_all()) == 1

    @pytest.mark.asyncio
    async def test_promotes_existing_account(self, auth_service):
        user = await auth_service.create_user("Ana", "a@x.com", "Password123")

        admin = await auth_service.ensure_admin("Root", "a@x.com", "Different123")

        assert admin.id == user.id
        assert admin.is_admin is True
        # Password is untouched
        await auth_service.sign_in("a@x.com", "Password123")
