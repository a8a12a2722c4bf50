"""
Service layer for schedules.

A schedule may reference a user group; the group must exist when the
reference is set.  Updates are merged into the stored record, with
``week_days`` merged day by day, and the result is validated as a
whole, so a partial update can not leave an ``end_date`` before the
``start_date``.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.storage import MemStorage, SCHEDULES, USER_GROUPS
from ..schemas.base import merge_changes
from ..schemas.schedule import ScheduleCreate, ScheduleRead


logger = logging.getLogger(__name__)


class ScheduleService:
    """Service for managing weekly schedules."""

    @classmethod
    async def list_schedules(cls, storage: MemStorage) -> List[ScheduleRead]:
        return [ScheduleRead.model_validate(row) for row in storage.list(SCHEDULES)]

    @classmethod
    async def get_schedule(cls, storage: MemStorage, schedule_id: int) -> ScheduleRead:
        row = storage.get(SCHEDULES, schedule_id)
        if row is None:
            raise ValueError("Schedule not found")
        return ScheduleRead.model_validate(row)

    @classmethod
    async def create_schedule(cls, storage: MemStorage, data: ScheduleCreate) -> ScheduleRead:
        cls._ensure_group_exists(storage, data.user_group_id)
        row = storage.insert(SCHEDULES, data.model_dump())
        logger.info("Schedule %s created (id=%s)", data.name, row["id"])
        return ScheduleRead.model_validate(row)

    @classmethod
    async def update_schedule(cls, storage: MemStorage, schedule_id: int, updates: Dict[str, Any]) -> ScheduleRead:
        """Merge ``updates`` into a schedule.

        Raises ``pydantic.ValidationError`` if the merged schedule is
        invalid; nothing is written in that case.
        """
        existing = storage.get(SCHEDULES, schedule_id)
        if existing is None:
            raise ValueError("Schedule not found")
        cls._ensure_group_exists(storage, updates.get("user_group_id"))
        existing.pop("id")
        merged = ScheduleCreate.model_validate(merge_changes(existing, updates))
        row = storage.update(SCHEDULES, schedule_id, merged.model_dump())
        logger.info("Schedule %s updated: %s", schedule_id, sorted(updates))
        return ScheduleRead.model_validate(row)

    @classmethod
    async def delete_schedule(cls, storage: MemStorage, schedule_id: int) -> ScheduleRead:
        row = storage.get(SCHEDULES, schedule_id)
        if row is None:
            raise ValueError("Schedule not found")
        storage.delete(SCHEDULES, schedule_id)
        logger.info("Schedule %s deleted", schedule_id)
        return ScheduleRead.model_validate(row)

    @staticmethod
    def _ensure_group_exists(storage: MemStorage, group_id: Optional[int]) -> None:
        if group_id is not None and not storage.exists(USER_GROUPS, group_id):
            raise ValueError("User group not found")
