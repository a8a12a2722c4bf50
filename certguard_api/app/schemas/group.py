"""
Pydantic models for user groups and group membership.
"""

from typing import Optional

from pydantic import Field

from .base import CamelModel


class UserGroupBase(CamelModel):
    name: str = Field(..., min_length=3, examples=["Financeiro"])
    description: Optional[str] = Field(None, examples=["Equipe financeira da empresa"])


class UserGroupCreate(UserGroupBase):
    """Schema for creating a user group."""
    pass


class UserGroupUpdate(CamelModel):
    """Schema for updating a group; unspecified fields remain unchanged."""

    name: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None


class UserGroupRead(UserGroupBase):
    id: int


class GroupMembershipCreate(CamelModel):
    """Body of ``POST /user-groups/members``."""

    user_id: int = Field(..., gt=0)
    group_id: int = Field(..., gt=0)


class GroupMembershipRead(GroupMembershipCreate):
    id: int
