"""Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database registered as the
default connection and seeded with a few users, posts and tags.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import insert

from ormwrap.db import Database, close_databases, init_database
from ormwrap.domain import registry
from tests.models import metadata, post_table, tag_table, user_profile_table, user_table


@pytest.fixture
def db() -> Iterator[Database]:
    database = init_database("sqlite://")
    metadata.create_all(database.engine)
    with database.begin() as conn:
        conn.execute(
            insert(user_table),
            [
                {"id": 1, "name": "Alice", "email": "alice@example.com", "active": 1},
                {"id": 2, "name": "Bob", "email": None, "active": 0},
                {"id": 3, "name": "Carol", "email": "carol@example.com", "active": 1},
            ],
        )
        conn.execute(
            insert(post_table),
            [
                {"id": 1, "user_id": 1, "title": "Hello", "published_at": "2024-01-01"},
                {"id": 2, "user_id": 1, "title": "Draft", "published_at": None},
                {"id": 3, "user_id": 3, "title": "Carol's post", "published_at": "2024-02-01"},
            ],
        )
        conn.execute(insert(user_profile_table), [{"id": 1, "user_id": 1, "bio": "Likes SQL"}])
        conn.execute(insert(tag_table), [{"tag_id": 10, "label": "python"}])
    yield database
    close_databases()


@pytest.fixture(autouse=True)
def model_registry() -> Iterator[None]:
    """Drop model classes defined inside a test once the test finishes."""
    before = set(registry._model_registry.values())
    yield
    for model_class in list(registry._model_registry.values()):
        if model_class not in before:
            registry.unregister_model(model_class)
