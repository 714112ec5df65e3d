"""Stats Routes — dashboard aggregates and the monthly time series."""

from fastapi import APIRouter, Depends

from decision_log.api.dependencies import get_repository
from decision_log.core.stats import calculate_stats, calculate_time_series
from decision_log.services.decision_repository import DecisionRepository

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


@router.get("")
async def get_stats(repo: DecisionRepository = Depends(get_repository)):
    stats = calculate_stats(await repo.list_all())
    return stats.to_camel_dict()


@router.get("/timeseries")
async def get_time_series(repo: DecisionRepository = Depends(get_repository)):
    points = calculate_time_series(await repo.list_all())
    return [p.to_camel_dict() for p in points]
