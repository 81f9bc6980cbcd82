from fastapi import APIRouter

from bloodlink.schemas import StatsOut
from bloodlink.services.stats_service import get_overview_stats

router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("", response_model=StatsOut)
async def overview_stats():
    return StatsOut(**await get_overview_stats())
