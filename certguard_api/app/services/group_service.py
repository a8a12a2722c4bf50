"""
Service layer for user groups and group membership.

Membership is stored as separate ``user_to_group`` rows.  Adding a
user that is already a member returns the existing row.  Deleting a
group does not remove its membership or certificate rows; lookups
skip rows whose user or certificate no longer exists.
"""

import logging
from typing import Any, Dict, List

from ..core.storage import (
    CERTIFICATES,
    CERTIFICATE_TO_GROUP,
    MemStorage,
    USERS,
    USER_GROUPS,
    USER_TO_GROUP,
)
from ..schemas.certificate import CertificateRead
from ..schemas.group import GroupMembershipCreate, GroupMembershipRead, UserGroupCreate, UserGroupRead
from ..schemas.user import UserRead


logger = logging.getLogger(__name__)


class GroupService:
    """Service for managing user groups and their members."""

    @classmethod
    async def list_groups(cls, storage: MemStorage) -> List[UserGroupRead]:
        return [UserGroupRead.model_validate(row) for row in storage.list(USER_GROUPS)]

    @classmethod
    async def get_group(cls, storage: MemStorage, group_id: int) -> UserGroupRead:
        row = storage.get(USER_GROUPS, group_id)
        if row is None:
            raise ValueError("User group not found")
        return UserGroupRead.model_validate(row)

    @classmethod
    async def create_group(cls, storage: MemStorage, data: UserGroupCreate) -> UserGroupRead:
        row = storage.insert(USER_GROUPS, data.model_dump())
        logger.info("User group %s created (id=%s)", data.name, row["id"])
        return UserGroupRead.model_validate(row)

    @classmethod
    async def update_group(cls, storage: MemStorage, group_id: int, updates: Dict[str, Any]) -> UserGroupRead:
        row = storage.update(USER_GROUPS, group_id, updates)
        if row is None:
            raise ValueError("User group not found")
        logger.info("User group %s updated: %s", group_id, sorted(updates))
        return UserGroupRead.model_validate(row)

    @classmethod
    async def delete_group(cls, storage: MemStorage, group_id: int) -> UserGroupRead:
        row = storage.get(USER_GROUPS, group_id)
        if row is None:
            raise ValueError("User group not found")
        storage.delete(USER_GROUPS, group_id)
        logger.info("User group %s deleted", group_id)
        return UserGroupRead.model_validate(row)

    @classmethod
    async def add_member(cls, storage: MemStorage, data: GroupMembershipCreate) -> GroupMembershipRead:
        """Add a user to a group; both must exist."""
        if not storage.exists(USERS, data.user_id):
            raise ValueError("User not found")
        if not storage.exists(USER_GROUPS, data.group_id):
            raise ValueError("User group not found")
        existing = storage.find(USER_TO_GROUP, user_id=data.user_id, group_id=data.group_id)
        if existing:
            return GroupMembershipRead.model_validate(existing[0])
        row = storage.insert(USER_TO_GROUP, data.model_dump())
        logger.info("User %s added to group %s", data.user_id, data.group_id)
        return GroupMembershipRead.model_validate(row)

    @classmethod
    async def remove_member(cls, storage: MemStorage, group_id: int, user_id: int) -> None:
        rows = storage.find(USER_TO_GROUP, user_id=user_id, group_id=group_id)
        if not rows:
            raise ValueError("Membership not found")
        for row in rows:
            storage.delete(USER_TO_GROUP, row["id"])
        logger.info("User %s removed from group %s", user_id, group_id)

    @classmethod
    async def list_members(cls, storage: MemStorage, group_id: int) -> List[UserRead]:
        if not storage.exists(USER_GROUPS, group_id):
            raise ValueError("User group not found")
        members = []
        for membership in storage.find(USER_TO_GROUP, group_id=group_id):
            user = storage.get(USERS, membership["user_id"])
            if user is not None:
                members.append(UserRead.model_validate(user))
        return members

    @classmethod
    async def list_certificates(cls, storage: MemStorage, group_id: int) -> List[CertificateRead]:
        if not storage.exists(USER_GROUPS, group_id):
            raise ValueError("User group not found")
        certificates = []
        for link in storage.find(CERTIFICATE_TO_GROUP, group_id=group_id):
            certificate = storage.get(CERTIFICATES, link["certificate_id"])
            if certificate is not None:
                certificates.append(CertificateRead.model_validate(certificate))
        return certificates
