"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt only reads the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72


def check_password(v: str) -> str:
    """Reject passwords bcrypt would refuse or silently truncate."""
    if "\x00" in v:
        raise ValueError("password must not contain NUL characters")
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


class UserCreate(BaseModel):
    """User creation request."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def username_trim(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username is required")
        return v

    @field_validator("password")
    @classmethod
    def password_bcrypt_safe(cls, v: str) -> str:
        return check_password(v)


class UserUpdate(BaseModel):
    """User update request. Omitted fields are left untouched."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)
    password: str | None = Field(None, min_length=1)

    @field_validator("username")
    @classmethod
    def username_trim(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("username is required")
        return v

    @field_validator("password")
    @classmethod
    def password_bcrypt_safe(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return check_password(v)


class UserResponse(BaseModel):
    """User information response. The password hash is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime
