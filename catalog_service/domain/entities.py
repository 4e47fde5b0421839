"""
Domain entities for catalog records.

Records are immutable: an update produces a new value via dataclasses.replace.
Each entity knows how to map itself to and from the camelCase document shape
persisted in the collection files.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Dict, Mapping, Tuple, TypeVar, Union

from ..exceptions import ValidationException

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def new_id() -> str:
    """Default id strategy: random UUID4 hex."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Default clock: current UTC time."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class UserRecord:
    """A registered user. `password` always holds a bcrypt hash."""

    id: str
    name: str
    email: str
    password: str
    is_admin: bool = False
    created_at: datetime = field(default_factory=utc_now)

    UPDATABLE: ClassVar[Tuple[str, ...]] = ("name", "email", "password", "is_admin")

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "isAdmin": self.is_admin,
            "createdAt": format_timestamp(self.created_at),
        }

    def to_public(self) -> Dict[str, Any]:
        """Document shape without the password field."""
        document = self.to_document()
        del document["password"]
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(document["id"]),
            name=document.get("name", ""),
            email=document.get("email", ""),
            password=document.get("password", ""),
            is_admin=bool(document.get("isAdmin", False)),
            created_at=parse_timestamp(document["createdAt"]),
        )


@dataclass(frozen=True)
class ProductRecord:
    """A catalog product. Category is a free-form grouping key."""

    id: str
    name: str
    description: str
    price: float
    category: str
    stock: int = 0
    created_at: datetime = field(default_factory=utc_now)

    UPDATABLE: ClassVar[Tuple[str, ...]] = ("name", "description", "price", "category", "stock")

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "stock": self.stock,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ProductRecord":
        return cls(
            id=str(document["id"]),
            name=document.get("name", ""),
            description=document.get("description", ""),
            price=document.get("price", 0),
            category=document.get("category", ""),
            stock=int(document.get("stock", 0)),
            created_at=parse_timestamp(document["createdAt"]),
        )


Record = TypeVar("Record", bound=Union[UserRecord, ProductRecord])


def merge_patch(record: Record, fields: Mapping[str, Any]) -> Record:
    """
    Apply a merge-patch to an immutable record.

    Only keys present with a non-None value overwrite; falsy values such as
    0 or False are applied.

    Raises:
        ValidationException: If fields names an attribute that is not updatable
    """
    unknown = sorted(set(fields) - set(record.UPDATABLE))
    if unknown:
        raise ValidationException(f"Unknown fields: {', '.join(unknown)}", field=unknown[0])
    changes = {key: value for key, value in fields.items() if value is not None}
    if not changes:
        return record
    return replace(record, **changes)
