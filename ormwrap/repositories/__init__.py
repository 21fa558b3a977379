"""Repositories package."""
from ormwrap.repositories.base import BaseRepository

__all__ = ["BaseRepository"]
