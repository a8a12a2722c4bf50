"""
Service layer for access policies.

Policies are stored as plain data.  Updates are merged into the stored
record and validated as a whole.  No code path evaluates the URL
lists or access hours against real requests.
"""

import logging
from typing import Any, Dict, List

from ..core.storage import ACCESS_POLICIES, MemStorage
from ..schemas.base import merge_changes
from ..schemas.policy import AccessPolicyCreate, AccessPolicyRead


class PolicyService:
    """Service for managing access policies."""

    @classmethod
    async def list_policies(cls, storage: MemStorage) -> List[AccessPolicyRead]:
        return [AccessPolicyRead.model_validate(row) for row in storage.list(ACCESS_POLICIES)]

    @classmethod
    async def get_policy(cls, storage: MemStorage, policy_id: int) -> AccessPolicyRead:
        row = storage.get(ACCESS_POLICIES, policy_id)
        if row is None:
            raise ValueError("Access policy not found")
        return AccessPolicyRead.model_validate(row)

    @classmethod
    async def create_policy(cls, storage: MemStorage, data: AccessPolicyCreate) -> AccessPolicyRead:
        logger = logging.getLogger(__name__)
        row = storage.insert(ACCESS_POLICIES, data.model_dump())
        logger.info("Access policy %s created (id=%s)", data.name, row["id"])
        return AccessPolicyRead.model_validate(row)

    @classmethod
    async def update_policy(cls, storage: MemStorage, policy_id: int, updates: Dict[str, Any]) -> AccessPolicyRead:
        """Merge ``updates`` into a policy.

        ``access_hours`` is merged key by key.  Raises
        ``pydantic.ValidationError`` if the result is not a valid policy,
        e.g. access hours without a start time.
        """
        logger = logging.getLogger(__name__)
        existing = storage.get(ACCESS_POLICIES, policy_id)
        if existing is None:
            raise ValueError("Access policy not found")
        existing.pop("id")
        merged = AccessPolicyCreate.model_validate(merge_changes(existing, updates))
        row = storage.update(ACCESS_POLICIES, policy_id, merged.model_dump())
        logger.info("Access policy %s updated", policy_id)
        return AccessPolicyRead.model_validate(row)

    @classmethod
    async def delete_policy(cls, storage: MemStorage, policy_id: int) -> AccessPolicyRead:
        logger = logging.getLogger(__name__)
        row = storage.get(ACCESS_POLICIES, policy_id)
        if row is None:
            raise ValueError("Access policy not found")
        storage.delete(ACCESS_POLICIES, policy_id)
        logger.info("Access policy %s deleted", policy_id)
        return AccessPolicyRead.model_validate(row)
