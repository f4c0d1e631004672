"""Settings tests."""

import pytest
from pydantic import ValidationError

from src.config import Settings


def test_default_rounds():
    """Test the default bcrypt cost factor."""
    assert Settings(_env_file=None, password_hash_rounds=10).password_hash_rounds == 10
    assert Settings.model_fields["password_hash_rounds"].default == 10


@pytest.mark.parametrize("rounds", [3, 32])
def test_rounds_out_of_range(rounds):
    """Test that bcrypt cost factors outside 4..31 are rejected."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, password_hash_rounds=rounds)


def test_production_rejects_localhost():
    """Test that production refuses a localhost database."""
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            environment="production",
            database_url="postgresql://u:p@localhost/db",
        )


def test_production_rejects_low_rounds():
    """Test that production refuses a weak cost factor."""
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            environment="production",
            database_url="postgresql://u:p@db.internal/db",
            password_hash_rounds=4,
        )


def test_log_level_normalized():
    assert Settings(_env_file=None, log_level=" debug ").log_level == "DEBUG"
