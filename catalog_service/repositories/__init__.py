"""Persistence layer: JSON record store and the repositories built on it."""

from .product_repository import ProductRepository
from .record_store import JsonRecordStore
from .user_repository import UserRepository

__all__ = ["JsonRecordStore", "ProductRepository", "UserRepository"]
