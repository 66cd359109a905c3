# api/exercises.py
from fastapi import APIRouter, HTTPException, Depends
from typing import Dict, Any, List

from models.exercise_schemas import ExerciseCreate, ExerciseResponse, EXERCISE_UPDATE_FIELDS, DEFAULT_UNIT
from services.supabase_service import get_supabase_service
from utils.auth import get_current_user_id
from utils.update_utils import sanitize_updates

router = APIRouter()

async def require_workout(workout_id: str, user_id: str) -> Dict[str, Any]:
    """The user's workout, or 404 when it does not exist or belongs to someone else"""
    try:
        workout = await get_supabase_service().get_workout(workout_id, user_id)
    except Exception as e:
        print(f"❌ Error verifying workout {workout_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch workout")

    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout

@router.get("/{workout_id}/exercises", response_model=List[ExerciseResponse])
async def list_exercises(workout_id: str, user_id: str = Depends(get_current_user_id)):
    await require_workout(workout_id, user_id)

    try:
        return await get_supabase_service().get_exercises(workout_id)
    except Exception as e:
        print(f"❌ Error fetching exercises: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch exercises")

@router.post("/{workout_id}/exercises", response_model=ExerciseResponse)
async def create_exercise(
    workout_id: str,
    request: ExerciseCreate,
    user_id: str = Depends(get_current_user_id)
):
    """Add an exercise; the unit is stored as given, defaulting to lbs"""
    await require_workout(workout_id, user_id)

    if not request.name:
        raise HTTPException(status_code=400, detail="Exercise name is required")

    try:
        return await get_supabase_service().create_exercise({
            'workout_id': workout_id,
            'name': request.name,
            'sets': request.sets,
            'reps': request.reps,
            'weight': request.weight,
            'unit': request.unit or DEFAULT_UNIT,
            'order': request.order if request.order is not None else 0
        })
    except Exception as e:
        print(f"❌ Error creating exercise: {e}")
        raise HTTPException(status_code=500, detail="Failed to create exercise")

@router.patch("/{workout_id}/exercises/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(
    workout_id: str,
    exercise_id: str,
    updates: Dict[str, Any],
    user_id: str = Depends(get_current_user_id)
):
    await require_workout(workout_id, user_id)
    sanitized_updates = sanitize_updates(updates, EXERCISE_UPDATE_FIELDS)

    try:
        supabase_service = get_supabase_service()
        if sanitized_updates:
            exercise = await supabase_service.update_exercise(exercise_id, workout_id, sanitized_updates)
        else:
            exercise = await supabase_service.get_exercise(exercise_id, workout_id)
    except Exception as e:
        print(f"❌ Error updating exercise: {e}")
        raise HTTPException(status_code=500, detail="Failed to update exercise")

    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise

@router.delete("/{workout_id}/exercises/{exercise_id}")
async def delete_exercise(
    workout_id: str,
    exercise_id: str,
    user_id: str = Depends(get_current_user_id)
):
    await require_workout(workout_id, user_id)

    try:
        await get_supabase_service().delete_exercise(exercise_id, workout_id)
        return {"success": True}
    except Exception as e:
        print(f"❌ Error deleting exercise: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete exercise")
