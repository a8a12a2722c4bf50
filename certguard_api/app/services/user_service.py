"""
Business logic for users.

Passwords are hashed with ``core.security.hash_password`` before they
reach the store and are stripped from every value returned to the API
layer.  Usernames must be unique; the check happens here because the
in-memory store enforces no constraints of its own.
"""

import logging
from typing import Any, Dict, List

from ..core.errors import DuplicateError
from ..core.security import hash_password
from ..core.storage import MemStorage, USERS, USER_GROUPS, USER_TO_GROUP
from ..schemas.group import UserGroupRead
from ..schemas.user import UserCreate, UserRead


logger = logging.getLogger(__name__)


class UserService:
    """Service for creating, reading, updating and deleting users."""

    @classmethod
    async def list_users(cls, storage: MemStorage) -> List[UserRead]:
        return [UserRead.model_validate(row) for row in storage.list(USERS)]

    @classmethod
    async def get_user(cls, storage: MemStorage, user_id: int) -> UserRead:
        row = storage.get(USERS, user_id)
        if row is None:
            raise ValueError("User not found")
        return UserRead.model_validate(row)

    @classmethod
    async def create_user(cls, storage: MemStorage, data: UserCreate) -> UserRead:
        """Create a user after checking that the username is free."""
        cls._ensure_username_free(storage, data.username)
        values = data.model_dump()
        values["password"] = hash_password(data.password)
        row = storage.insert(USERS, values)
        logger.info("User %s created (id=%s)", data.username, row["id"])
        return UserRead.model_validate(row)

    @classmethod
    async def update_user(cls, storage: MemStorage, user_id: int, updates: Dict[str, Any]) -> UserRead:
        """Apply a partial update.

        A new ``password`` is hashed; changing ``username`` to one
        already taken by another user raises ``DuplicateError``.
        """
        existing = storage.get(USERS, user_id)
        if existing is None:
            raise ValueError("User not found")
        username = updates.get("username")
        if username is not None and username != existing["username"]:
            cls._ensure_username_free(storage, username)
        if updates.get("password") is not None:
            updates = dict(updates, password=hash_password(updates["password"]))
        row = storage.update(USERS, user_id, updates)
        logger.info("User %s updated: %s", user_id, sorted(updates))
        return UserRead.model_validate(row)

    @classmethod
    async def delete_user(cls, storage: MemStorage, user_id: int) -> UserRead:
        # Memberships referencing the user are left in place.
        row = storage.get(USERS, user_id)
        if row is None:
            raise ValueError("User not found")
        storage.delete(USERS, user_id)
        logger.info("User %s deleted", user_id)
        return UserRead.model_validate(row)

    @classmethod
    async def list_groups_for_user(cls, storage: MemStorage, user_id: int) -> List[UserGroupRead]:
        """Return the groups a user belongs to.

        Membership rows pointing at deleted groups are skipped.
        """
        if not storage.exists(USERS, user_id):
            raise ValueError("User not found")
        groups = []
        for membership in storage.find(USER_TO_GROUP, user_id=user_id):
            group = storage.get(USER_GROUPS, membership["group_id"])
            if group is not None:
                groups.append(UserGroupRead.model_validate(group))
        return groups

    @staticmethod
    def _ensure_username_free(storage: MemStorage, username: str) -> None:
        if storage.find(USERS, username=username):
            raise DuplicateError("Username already exists")
