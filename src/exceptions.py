"""Domain exceptions raised by the user store."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class UserStoreError(Exception):
    """Base exception for user store failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

        logger.debug(f"{self.__class__.__name__}: {message}", extra={"details": self.details})


class ConstraintViolation(UserStoreError):
    """Raised when a write breaks a uniqueness or format rule."""

    UNIQUE = "unique"
    FORMAT = "format"
    REQUIRED = "required"
    READ_ONLY = "read_only"

    def __init__(self, field: str, reason: str = FORMAT, message: str | None = None):
        self.field = field
        self.reason = reason
        if message is None:
            if reason == self.UNIQUE:
                message = f"{field} is already taken"
            else:
                message = f"Invalid {field}"
        super().__init__(message, {"field": field, "reason": reason})

    @property
    def is_conflict(self) -> bool:
        """Uniqueness failures are conflicts; everything else is bad input."""
        return self.reason == self.UNIQUE


class HashingFailure(UserStoreError):
    """Raised when the password hash primitive fails."""

    def __init__(self, reason: str):
        super().__init__(f"Password hashing failed: {reason}", {"hashing_error": reason})


class NotFound(UserStoreError):
    """Raised when a record to read or update does not exist."""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity} {identifier} not found", {"entity": entity, "identifier": identifier}
        )
