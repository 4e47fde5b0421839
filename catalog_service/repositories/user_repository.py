"""JSON-file-backed user repository."""

from typing import Any, Dict, List, Mapping, Optional

from ..domain.entities import Clock, IdFactory, UserRecord, merge_patch, new_id, utc_now
from ..exceptions import NotFoundException, StorageException
from ..logging_config import get_logger
from .record_store import JsonRecordStore

logger = get_logger(__name__)


def _to_user(document: Dict[str, Any]) -> UserRecord:
    try:
        return UserRecord.from_document(document)
    except (KeyError, TypeError, ValueError) as e:
        raise StorageException("users", "decode", "malformed user record") from e


class UserRepository:
    """
    User records persisted in a single `users` collection document.

    Email uniqueness is not enforced here; callers check before creating.
    """

    def __init__(
        self,
        store: JsonRecordStore,
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self._id_factory = id_factory
        self._clock = clock

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        for document in await self.store.read():
            if document.get("email") == email:
                return _to_user(document)
        return None

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        for document in await self.store.read():
            if document.get("id") == user_id:
                return _to_user(document)
        return None

    async def get_all(self) -> List[Dict[str, Any]]:
        """All users in the public shape, password excluded."""
        return [_to_user(document).to_public() for document in await self.store.read()]

    async def create(
        self, name: str, email: str, password_hash: str, is_admin: bool = False
    ) -> UserRecord:
        user = UserRecord(
            id=self._id_factory(),
            name=name,
            email=email,
            password=password_hash,
            is_admin=is_admin,
            created_at=self._clock(),
        )
        async with self.store.mutate() as records:
            records.append(user.to_document())
        logger.info("User created", user_id=user.id, is_admin=is_admin)
        return user

    async def update(self, user_id: str, fields: Mapping[str, Any]) -> UserRecord:
        """
        Merge-patch a user.

        Args:
            user_id: Id of the user to update
            fields: Attribute names (name, email, password, is_admin) to new values

        Raises:
            NotFoundException: If no user has this id
            ValidationException: If fields names an unknown attribute
        """
        async with self.store.mutate() as records:
            for index, document in enumerate(records):
                if document.get("id") == user_id:
                    updated = merge_patch(_to_user(document), fields)
                    records[index] = updated.to_document()
                    break
            else:
                raise NotFoundException("User", user_id)
        logger.info("User updated", user_id=user_id, fields=sorted(fields))
        return updated

    async def delete(self, user_id: str) -> bool:
        """Remove a user. Returns False when no user had this id."""
        async with self.store.mutate() as records:
            remaining = [document for document in records if document.get("id") != user_id]
            removed = len(remaining) != len(records)
            records[:] = remaining
        if removed:
            logger.info("User deleted", user_id=user_id)
        return removed
