"""API v1 routers."""

from . import auth, products, users

__all__ = ["auth", "products", "users"]
