"""
Schedule endpoints.

Schedules describe weekly time windows, optionally tied to a user
group.  A PUT may send only some ``weekDays`` entries; the others keep
their stored values.  A merged update that would put ``endDate``
before ``startDate`` is rejected with HTTP 400.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from certguard_api.app.api.deps import client_ip
from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.schedule import ScheduleCreate, ScheduleRead, ScheduleUpdate
from certguard_api.app.services.audit_service import AuditService
from certguard_api.app.services.schedule_service import ScheduleService


router = APIRouter()


@router.get("", response_model=List[ScheduleRead])
async def list_schedules(storage: MemStorage = Depends(get_storage)) -> List[ScheduleRead]:
    return await ScheduleService.list_schedules(storage)


@router.post("", response_model=ScheduleRead, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule: ScheduleCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> ScheduleRead:
    try:
        created = await ScheduleService.create_schedule(storage, schedule)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "CREATE_SCHEDULE",
        details={"scheduleId": created.id, "name": created.name},
        ip_address=ip_address,
    )
    return created


@router.get("/{schedule_id}", response_model=ScheduleRead)
async def get_schedule(schedule_id: int, storage: MemStorage = Depends(get_storage)) -> ScheduleRead:
    try:
        return await ScheduleService.get_schedule(storage, schedule_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{schedule_id}", response_model=ScheduleRead)
async def update_schedule(
    schedule_id: int,
    updates: ScheduleUpdate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> ScheduleRead:
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = await ScheduleService.update_schedule(storage, schedule_id, update_dict)
    except ValidationError:
        # Subclass of ValueError; leave it to the 400 handler.
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "UPDATE_SCHEDULE",
        details={"scheduleId": schedule_id, "updates": sorted(update_dict)},
        ip_address=ip_address,
    )
    return updated


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(
    schedule_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    try:
        deleted = await ScheduleService.delete_schedule(storage, schedule_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "DELETE_SCHEDULE",
        details={"scheduleId": schedule_id, "name": deleted.name},
        ip_address=ip_address,
    )
    return None
