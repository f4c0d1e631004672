"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_user_store
from src.schemas.user import UserCreate, UserResponse, UserUpdate
from src.services.user_store import UserStore

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Create a user account."""
    return store.create(user_data.username, user_data.email, user_data.password)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Get a user by ID."""
    return store.get(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Update a user. Only the fields present in the request are changed."""
    return store.update(user_id, **user_data.model_dump(exclude_unset=True))
