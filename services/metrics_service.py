# services/metrics_service.py

from typing import Dict, Any, List, Optional
from datetime import date, timedelta
import math
from services.supabase_service import get_supabase_service
from utils.timezone_utils import parse_workout_date

KG_TO_LBS = 2.2
WINDOW_DAYS = 14
WEEK_DAYS = 7
TREND_THRESHOLD = 5

# Units that count toward training volume; None means the row predates units
VOLUME_UNITS = (None, 'lbs', 'kg')

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def exercise_volume(exercise: Dict[str, Any]) -> float:
    """sets x reps x load in pounds; zero for cardio, bodyweight or incomplete rows"""
    sets = exercise.get('sets')
    reps = exercise.get('reps')
    weight = exercise.get('weight')
    unit = exercise.get('unit')

    if not (sets and reps and weight) or unit not in VOLUME_UNITS:
        return 0.0

    weight_lbs = weight * KG_TO_LBS if unit == 'kg' else weight
    return sets * reps * weight_lbs

def calculate_volume(workouts: List[Dict[str, Any]], exercises_by_workout: Dict[str, List[Dict[str, Any]]]) -> float:
    volume = 0.0
    for workout in workouts:
        for exercise in exercises_by_workout.get(workout['id'], []):
            volume += exercise_volume(exercise)
    return volume

def calculate_score(workout_count: int, volume: float, max_volume: float) -> int:
    """Composite 0-100 score: consistency (0-50) plus relative volume (0-50)"""
    # Four or more workouts a week earns the full consistency half
    consistency_score = min(workout_count * 12.5, 50)
    volume_score = (volume / max_volume) * 50 if max_volume > 0 else 0
    return round_half_up(consistency_score + volume_score)

def calculate_trend(current_score: int, previous_score: int) -> str:
    if current_score > previous_score + TREND_THRESHOLD:
        return 'up'
    if current_score < previous_score - TREND_THRESHOLD:
        return 'down'
    return 'stable'

def calculate_streak(workout_dates: List[date], today: date) -> int:
    """Consecutive days with a workout, anchored at today or yesterday.

    A streak whose latest day is older than yesterday has lapsed and counts as 0.
    """
    if not workout_dates:
        return 0

    dates = set(workout_dates)
    most_recent = max(dates)
    if most_recent not in (today, today - timedelta(days=1)):
        return 0

    streak = 0
    check_date = most_recent
    while check_date in dates:
        streak += 1
        check_date -= timedelta(days=1)
    return streak

def day_score(workout_count: int, day_volume: float) -> int:
    if workout_count == 0:
        return 0
    return round_half_up(min(30 + day_volume / 100, 100))

def compute_fitness_metrics(
    workouts: List[Dict[str, Any]],
    exercises: List[Dict[str, Any]],
    today: date
) -> Optional[Dict[str, Any]]:
    """Aggregate the trailing two weeks of workouts into a FitnessMetrics dict.

    Workouts outside [today - 13, today] are ignored. Returns None when no
    workout falls inside that window, which callers must keep distinct from
    a zero score.
    """
    window_start = today - timedelta(days=WINDOW_DAYS - 1)
    this_week_start = today - timedelta(days=WEEK_DAYS - 1)

    dated = []
    for workout in workouts:
        workout_date = parse_workout_date(workout['date'])
        if window_start <= workout_date <= today:
            dated.append((workout_date, workout))

    if not dated:
        return None

    exercises_by_workout: Dict[str, List[Dict[str, Any]]] = {}
    for exercise in exercises:
        exercises_by_workout.setdefault(exercise['workout_id'], []).append(exercise)

    this_week = [w for d, w in dated if d >= this_week_start]
    last_week = [w for d, w in dated if d < this_week_start]

    this_week_volume = round_half_up(calculate_volume(this_week, exercises_by_workout))
    last_week_volume = round_half_up(calculate_volume(last_week, exercises_by_workout))

    max_volume = max(this_week_volume, last_week_volume)
    current_score = calculate_score(len(this_week), this_week_volume, max_volume)
    previous_score = calculate_score(len(last_week), last_week_volume, max_volume)

    weekly_data = []
    for days_ago in range(WEEK_DAYS - 1, -1, -1):
        day = today - timedelta(days=days_ago)
        day_workouts = [w for d, w in dated if d == day]
        day_volume = calculate_volume(day_workouts, exercises_by_workout)
        weekly_data.append({
            'date': day.isoformat(),
            'score': day_score(len(day_workouts), day_volume),
            'workoutCount': len(day_workouts)
        })

    return {
        'currentScore': current_score,
        'previousScore': previous_score,
        'weeklyWorkouts': len(this_week),
        'streak': calculate_streak([d for d, _ in dated], today),
        'totalVolume': this_week_volume,
        'trend': calculate_trend(current_score, previous_score),
        'weeklyData': weekly_data
    }

class MetricsService:
    def __init__(self, supabase_service=None):
        self.supabase_service = supabase_service or get_supabase_service()

    async def get_fitness_metrics(self, user_id: str, today: date) -> Optional[Dict[str, Any]]:
        """Fetch the trailing window of workouts and compute metrics"""
        window_start = today - timedelta(days=WINDOW_DAYS - 1)
        print(f"📊 Computing fitness metrics for user {user_id} since {window_start}")

        workouts = await self.supabase_service.get_workouts_since(user_id, window_start.isoformat())
        if not workouts:
            print(f"📊 No workouts since {window_start}")
            return None

        try:
            exercises = await self.supabase_service.get_exercises_for_workouts([w['id'] for w in workouts])
        except Exception as e:
            # Volume drops out; scores fall back to consistency only
            print(f"⚠️ Metrics continuing without exercises: {e}")
            exercises = []

        metrics = compute_fitness_metrics(workouts, exercises, today)
        if metrics:
            print(f"✅ Metrics: score {metrics['currentScore']} (prev {metrics['previousScore']}), streak {metrics['streak']}")
        return metrics
