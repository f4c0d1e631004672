"""FastAPI dependencies for the database and services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from src.database import get_db
from src.services.user_store import UserStore


def get_user_store(
    db: Annotated[Session, Depends(get_db)],
) -> UserStore:
    """Get user store bound to the request's session."""
    return UserStore(db)
