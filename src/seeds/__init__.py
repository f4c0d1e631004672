"""Seed data."""

from src.seeds.users import FIXTURE_USERS, build_fixtures, seed_users

__all__ = ["FIXTURE_USERS", "build_fixtures", "seed_users"]
