# models/metrics_schemas.py
from pydantic import BaseModel
from typing import List

class DailyScore(BaseModel):
    date: str
    score: int
    workoutCount: int

class FitnessMetrics(BaseModel):
    currentScore: int
    previousScore: int
    weeklyWorkouts: int
    streak: int
    totalVolume: int
    trend: str  # up, down or stable
    weeklyData: List[DailyScore]
