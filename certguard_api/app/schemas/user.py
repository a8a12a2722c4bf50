"""
Pydantic models for users.

``UserCreate`` carries the plain password, which the service hashes
before storing.  ``UserRead`` never includes the password.
"""

from typing import Optional

from pydantic import Field

from .base import CamelModel


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserBase(CamelModel):
    username: str = Field(..., min_length=3, examples=["jsilva"])
    full_name: str = Field(..., min_length=3, examples=["João Silva"])
    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["joao.silva@acmecorp.com"])
    role: str = Field("user", min_length=1, examples=["admin"])
    avatar_url: Optional[str] = None
    is_active: bool = True


class UserCreate(UserBase):
    """Schema for creating a user."""

    password: str = Field(..., min_length=6, examples=["s3nh@forte"])


class UserUpdate(CamelModel):
    """Schema for updating a user.

    All fields are optional; only provided fields will be updated.
    """

    username: Optional[str] = Field(None, min_length=3)
    full_name: Optional[str] = Field(None, min_length=3)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    role: Optional[str] = Field(None, min_length=1)
    avatar_url: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
