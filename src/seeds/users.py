"""Fixture user accounts."""

import logging

from src.config import get_settings
from src.models.user import User
from src.services.user_store import UserStore

logger = logging.getLogger(__name__)

FIXTURE_USERS = [
    {"username": "alice", "email": "alice@example.com"},
    {"username": "bob", "email": "bob@example.com"},
    {"username": "carol", "email": "carol@example.com"},
    {"username": "dave", "email": "dave@example.com"},
    {"username": "erin", "email": "erin@example.com"},
]


def build_fixtures(password: str | None = None) -> list[dict]:
    """Fixture records with a plaintext password filled in."""
    if password is None:
        password = get_settings().seed_default_password
    return [{**fixture, "password": password} for fixture in FIXTURE_USERS]


def seed_users(store: UserStore, password: str | None = None) -> list[User]:
    """Insert the fixture users through the store's normal insert path."""
    users = store.bulk_create(build_fixtures(password))
    logger.info(f"Seeded {len(users)} users")
    return users
