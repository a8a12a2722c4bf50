"""
Dashboard statistics and health endpoints.
"""

from typing import Dict

from fastapi import APIRouter, Depends

from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.audit import StatsRead
from certguard_api.app.services.statistics_service import StatisticsService


router = APIRouter()


@router.get("/stats", response_model=StatsRead)
async def get_stats(storage: MemStorage = Depends(get_storage)) -> StatsRead:
    """Return dashboard counters, recomputed on every call."""
    return await StatisticsService.overview(storage)


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}
