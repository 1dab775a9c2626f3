"""Statistics & Policy Routes — registry aggregates and the category age table.

Invariants:
    - Statistics are read from the running aggregates in O(1), never by scanning records
"""

from fastapi import APIRouter, Depends

from athlete_registry.api.dependencies import get_registry
from athlete_registry.schemas.registration import StatisticsResponse
from athlete_registry.services.registry import Registry

router = APIRouter(prefix="/api/v1", tags=["statistics"])


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(registry: Registry = Depends(get_registry)):
    total, decrypted, average = registry.get_statistics()
    return StatisticsResponse(
        total_records=total,
        decrypted_records=decrypted,
        average_latency_seconds=average,
    )


@router.get("/categories")
async def category_min_ages(registry: Registry = Depends(get_registry)):
    """Minimum age per sport category."""
    return {"min_ages": registry.category_min_ages()}
