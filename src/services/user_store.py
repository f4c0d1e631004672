"""User store: validated, password-hashing write path for user accounts."""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.exceptions import ConstraintViolation, NotFound
from src.models.mixins import SYSTEM_MANAGED_COLUMNS
from src.models.user import User
from src.schemas.user import UserCreate, UserUpdate
from src.services.passwords import set_password

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("username", "email")
WRITABLE_FIELDS = frozenset({"username", "email", "password"})


def before_create(record: User) -> None:
    """Hash the password of a record about to be inserted.

    A brand-new record's password is always plaintext, so this hashes
    unconditionally.
    """
    set_password(record, record.password)


def before_update(record: User, changed: Iterable[str]) -> None:
    """Hash the password of a record about to be updated, if it changed."""
    if "password" in changed:
        set_password(record, record.password)


def _violation_from_validation_error(e: ValidationError) -> ConstraintViolation:
    error = e.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "unknown"
    if error["type"] == "extra_forbidden":
        reason = (
            ConstraintViolation.READ_ONLY
            if field in SYSTEM_MANAGED_COLUMNS
            else ConstraintViolation.FORMAT
        )
        return ConstraintViolation(field, reason, f"{field} cannot be set")
    if error["type"] == "missing":
        return ConstraintViolation(field, ConstraintViolation.REQUIRED, f"{field} is required")
    return ConstraintViolation(field, ConstraintViolation.FORMAT, f"Invalid {field}: {error['msg']}")


# PostgreSQL: Key (email)=(...) / "ix_users_email"; SQLite: UNIQUE constraint failed: users.email
_INTEGRITY_FIELD_PATTERNS = (
    re.compile(r"key \((\w+)\)="),
    re.compile(r"ix_users_(\w+)"),
    re.compile(r"users\.(\w+)"),
)


def _field_from_integrity_error(e: IntegrityError) -> str:
    message = str(e.orig).lower()
    for pattern in _INTEGRITY_FIELD_PATTERNS:
        match = pattern.search(message)
        if match and match.group(1) in UNIQUE_FIELDS:
            return match.group(1)
    return "unknown"


class UserStore:
    """Store for user accounts.

    Every insert and update goes through :meth:`validate` and the password
    interceptors before anything is committed. A failed write rolls back the
    session, so no partial mutation is ever persisted.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, user_id: int) -> User:
        """Get a user by id, raising NotFound if it does not exist."""
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    def get_by_username(self, username: str) -> User | None:
        """Get a user by username."""
        return self.db.execute(select(User).where(User.username == username)).scalar_one_or_none()

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(User))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, values: Mapping[str, Any], current: User | None = None) -> dict[str, Any]:
        """Check format and uniqueness constraints for a write.

        ``values`` is a full record for an insert (``current`` is None) or the
        set of changed fields for an update of ``current``. Returns the
        normalized values.

        Raises:
            ConstraintViolation: naming the first offending field.
        """
        try:
            if current is None:
                cleaned = UserCreate.model_validate(dict(values)).model_dump()
            else:
                cleaned = UserUpdate.model_validate(dict(values)).model_dump(exclude_unset=True)
        except ValidationError as e:
            violation = _violation_from_validation_error(e)
            logger.warning(f"Rejected user write: {violation.message}")
            raise violation from e

        # UserUpdate allows None for omitted fields; an explicit None is not a value
        for field, value in cleaned.items():
            if value is None:
                logger.warning(f"Rejected user write: {field} is required")
                raise ConstraintViolation(field, ConstraintViolation.REQUIRED, f"{field} is required")

        for field in UNIQUE_FIELDS:
            if field not in cleaned:
                continue
            query = select(User.id).where(getattr(User, field) == cleaned[field])
            if current is not None:
                query = query.where(User.id != current.id)
            if self.db.execute(query).first() is not None:
                logger.warning(f"Rejected user write: duplicate {field}")
                raise ConstraintViolation(field, ConstraintViolation.UNIQUE)

        return cleaned

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _insert(self, values: Mapping[str, Any]) -> User:
        cleaned = self.validate(values)
        user = User(**cleaned)
        before_create(user)
        self.db.add(user)
        self.db.flush()
        return user

    def create(self, username: str, email: str, password: str) -> User:
        """Create a user, hashing its password before it is persisted."""
        try:
            user = self._insert({"username": username, "email": email, "password": password})
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolation(_field_from_integrity_error(e), ConstraintViolation.UNIQUE) from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    def bulk_create(self, fixtures: Iterable[Mapping[str, Any]]) -> list[User]:
        """Create many users in one transaction.

        Each record goes through the same validation and hashing as
        :meth:`create`. If any record fails, none are persisted.
        """
        users: list[User] = []
        try:
            for values in fixtures:
                users.append(self._insert(values))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolation(_field_from_integrity_error(e), ConstraintViolation.UNIQUE) from e
        except Exception:
            self.db.rollback()
            raise

        for user in users:
            self.db.refresh(user)
        logger.info(f"Created {len(users)} users")
        return users

    def update(self, user_id: int, **changes: Any) -> User:
        """Apply field-level changes to an existing user.

        Only fields whose value differs from the persisted row are written.
        A ``password`` equal to the stored hash counts as unchanged, so
        re-saving a loaded record never re-hashes it; any other password
        value is treated as new plaintext and hashed.
        """
        user = self.get(user_id)

        for field in changes:
            if field in SYSTEM_MANAGED_COLUMNS:
                logger.warning(f"Rejected user write: {field} is read-only")
                raise ConstraintViolation(field, ConstraintViolation.READ_ONLY, f"{field} cannot be set")
            if field not in WRITABLE_FIELDS:
                logger.warning(f"Rejected user write: unknown field {field}")
                raise ConstraintViolation(field, ConstraintViolation.FORMAT, f"Unknown field {field}")

        changed = {
            field: value for field, value in changes.items() if getattr(user, field, None) != value
        }
        if not changed:
            return user

        cleaned = self.validate(changed, current=user)
        try:
            for field, value in cleaned.items():
                setattr(user, field, value)
            before_update(user, cleaned.keys())
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolation(_field_from_integrity_error(e), ConstraintViolation.UNIQUE) from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        logger.info(f"Updated user {user.id}: {', '.join(sorted(cleaned))}")
        return user
