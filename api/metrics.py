# api/metrics.py
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from models.metrics_schemas import FitnessMetrics
from services.metrics_service import MetricsService
from utils.auth import get_current_user_id
from utils.timezone_utils import get_timezone_offset, get_user_today

router = APIRouter()

@router.get("", response_model=Optional[FitnessMetrics])
async def get_metrics(
    user_id: str = Depends(get_current_user_id),
    tz_offset: int = Depends(get_timezone_offset)
):
    """Fitness score over the last two weeks, or null with no recent workouts"""
    try:
        metrics_service = MetricsService()
        return await metrics_service.get_fitness_metrics(user_id, get_user_today(tz_offset))

    except Exception as e:
        print(f"❌ Error computing metrics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch metrics")
