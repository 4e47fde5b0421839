"""
Tests for domain entities.

Covers timestamp rendering, the camelCase document mapping and merge-patch
semantics.
"""

from datetime import datetime, timedelta, timezone

import pytest

from catalog_service.domain.entities import (
    ProductRecord,
    UserRecord,
    format_timestamp,
    merge_patch,
    new_id,
    parse_timestamp,
)
from catalog_service.exceptions import ValidationException

from .conftest import FIXED_NOW


def make_product(**overrides) -> ProductRecord:
    values = dict(
        id="p1",
        name="Pen",
        description="Blue ink",
        price=1.5,
        category="office",
        stock=3,
        created_at=FIXED_NOW,
    )
    values.update(overrides)
    return ProductRecord(**values)


class TestTimestamps:
    """Test timestamp formatting and parsing."""

    def test_format_has_milliseconds_and_z_suffix(self):
        assert format_timestamp(FIXED_NOW) == "2024-06-15T12:30:45.123Z"

    def test_format_converts_to_utc(self):
        offset = timezone(timedelta(hours=2))
        value = datetime(2024, 6, 15, 14, 30, 45, 123000, tzinfo=offset)

        assert format_timestamp(value) == "2024-06-15T12:30:45.123Z"

    def test_parse_inverts_format(self):
        assert parse_timestamp("2024-06-15T12:30:45.123Z") == FIXED_NOW


class TestIds:
    def test_new_id_is_unique(self):
        assert len({new_id() for _ in range(100)}) == 100


class TestUserRecord:
    """Test user document mapping."""

    def test_document_uses_camel_case_keys(self):
        user = UserRecord(
            id="u1",
            name="Ana",
            email="a@x.com",
            password="hash",
            created_at=FIXED_NOW,
        )

        assert user.to_document() == {
            "id": "u1",
            "name": "Ana",
            "email": "a@x.com",
            "password": "hash",
            "isAdmin": False,
            "createdAt": "2024-06-15T12:30:45.123Z",
        }

    def test_public_shape_excludes_password(self):
        user = UserRecord(id="u1", name="Ana", email="a@x.com", password="hash")

        assert "password" not in user.to_public()

    def test_from_document(self):
        user = UserRecord.from_document(
            {
                "id": "u1",
                "name": "Ana",
                "email": "a@x.com",
                "password": "hash",
                "isAdmin": True,
                "createdAt": "2024-06-15T12:30:45.123Z",
            }
        )

        assert user.is_admin is True
        assert user.created_at == FIXED_NOW


class TestMergePatch:
    """Test merge-patch semantics on immutable records."""

    def test_empty_patch_returns_same_record(self):
        product = make_product()

        assert merge_patch(product, {}) is product

    def test_none_values_are_ignored(self):
        product = make_product()

        updated = merge_patch(product, {"name": None, "price": 2.0})

        assert updated.name == "Pen"
        assert updated.price == 2.0

    def test_zero_values_are_applied(self):
        updated = merge_patch(make_product(), {"stock": 0, "price": 0})

        assert updated.stock == 0
        assert updated.price == 0

    def test_false_is_applied(self):
        user = UserRecord(id="u1", name="Ana", email="a@x.com", password="h", is_admin=True)

        assert merge_patch(user, {"is_admin": False}).is_admin is False

    def test_source_record_is_unchanged(self):
        product = make_product()

        merge_patch(product, {"name": "Pencil"})

        assert product.name == "Pen"

    def test_id_and_created_at_are_not_updatable(self):
        with pytest.raises(ValidationException) as exc_info:
            merge_patch(make_product(), {"id": "other", "created_at": FIXED_NOW})

        assert exc_info.value.details["field"] == "created_at"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationException, match="Unknown fields: color"):
            merge_patch(make_product(), {"color": "red"})
