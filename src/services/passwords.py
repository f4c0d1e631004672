"""Password hashing with a configurable bcrypt work factor."""

import logging
from functools import lru_cache
from typing import Protocol

from passlib.context import CryptContext
from passlib.exc import PasswordValueError
from passlib.hash import bcrypt as bcrypt_handler

from src.config import get_settings
from src.exceptions import ConstraintViolation, HashingFailure

logger = logging.getLogger(__name__)


class HasPassword(Protocol):
    password: str | None


@lru_cache
def get_password_context(rounds: int) -> CryptContext:
    """Get a bcrypt context for the given cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def _current_context() -> CryptContext:
    return get_password_context(get_settings().password_hash_rounds)


def hash_password(plaintext: str, rounds: int | None = None) -> str:
    """Hash a password with a fresh random salt."""
    if rounds is None:
        rounds = get_settings().password_hash_rounds
    try:
        return get_password_context(rounds).hash(plaintext)
    except PasswordValueError as e:
        # Input bcrypt refuses, e.g. NUL bytes
        raise ConstraintViolation("password", ConstraintViolation.FORMAT, f"Invalid password: {e}") from e
    except (ValueError, TypeError, MemoryError, RuntimeError) as e:
        logger.error(f"bcrypt hashing failed: {e}")
        raise HashingFailure(str(e)) from e


def verify(plaintext: str, hashed: str) -> bool:
    """Verify a password against its hash."""
    if plaintext is None or hashed is None:
        return False
    try:
        return _current_context().verify(plaintext, hashed)
    except ValueError:
        # Not a recognised hash
        return False


def is_hashed(value: str | None) -> bool:
    """Check whether a value is already a hash this context understands."""
    if not value:
        return False
    return _current_context().identify(value) is not None


def needs_rehash(hashed: str) -> bool:
    """Check whether a stored hash was made with a different work factor."""
    if not is_hashed(hashed):
        return True
    return bcrypt_handler.from_string(hashed).rounds != get_settings().password_hash_rounds


def set_password(record: HasPassword, plaintext: str | None, rounds: int | None = None) -> None:
    """Hash ``plaintext`` and store the result in ``record.password``.

    Raises:
        ConstraintViolation: if the plaintext is missing, empty or refused by bcrypt.
        HashingFailure: if the hash primitive errors; ``record`` is left as it was.
    """
    if plaintext is None or plaintext == "":
        raise ConstraintViolation("password", ConstraintViolation.REQUIRED, "password is required")
    record.password = hash_password(plaintext, rounds)
