"""Catalog Service: users and products over JSON files, with JWT auth."""

from .app import create_app

__all__ = ["create_app"]
