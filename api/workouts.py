# api/workouts.py
from fastapi import APIRouter, HTTPException, Depends
from typing import Dict, Any, List

from models.workout_schemas import WorkoutCreate, WorkoutResponse, WORKOUT_UPDATE_FIELDS
from services.supabase_service import get_supabase_service
from services.templates import get_template, build_template_exercises
from utils.auth import get_current_user_id
from utils.timezone_utils import get_timezone_offset, get_user_today
from utils.update_utils import sanitize_updates

router = APIRouter()

@router.get("", response_model=List[WorkoutResponse])
async def list_workouts(user_id: str = Depends(get_current_user_id)):
    """List the user's workouts, newest first"""
    try:
        supabase_service = get_supabase_service()
        return await supabase_service.get_workouts(user_id)

    except Exception as e:
        print(f"❌ Error fetching workouts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch workouts")

@router.post("", response_model=WorkoutResponse)
async def create_workout(
    request: WorkoutCreate,
    user_id: str = Depends(get_current_user_id),
    tz_offset: int = Depends(get_timezone_offset)
):
    """Create today's workout from a template"""
    template = get_template(request.template_id)
    if not template:
        raise HTTPException(status_code=400, detail="Invalid template")

    supabase_service = get_supabase_service()

    try:
        workout = await supabase_service.create_workout({
            'user_id': user_id,
            'name': template['name'],
            'tag': template['tag'],
            'date': get_user_today(tz_offset).isoformat()
        })
    except Exception as e:
        print(f"❌ Error creating workout: {e}")
        raise HTTPException(status_code=500, detail="Failed to create workout")

    exercise_rows = build_template_exercises(template, workout['id'])
    if exercise_rows:
        try:
            await supabase_service.create_exercises(exercise_rows)
            print(f"✅ Added {len(exercise_rows)} template exercises to {workout['id']}")
        except Exception as e:
            # The workout itself exists, so the request still succeeds
            print(f"⚠️ Error creating template exercises: {e}")

    return workout

@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(workout_id: str, user_id: str = Depends(get_current_user_id)):
    try:
        supabase_service = get_supabase_service()
        workout = await supabase_service.get_workout(workout_id, user_id)
    except Exception as e:
        print(f"❌ Error fetching workout: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch workout")

    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout

@router.patch("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: str,
    updates: Dict[str, Any],
    user_id: str = Depends(get_current_user_id)
):
    """Update name, tag, date or notes of a workout"""
    sanitized_updates = sanitize_updates(updates, WORKOUT_UPDATE_FIELDS)

    try:
        supabase_service = get_supabase_service()
        if sanitized_updates:
            workout = await supabase_service.update_workout(workout_id, user_id, sanitized_updates)
        else:
            workout = await supabase_service.get_workout(workout_id, user_id)
    except Exception as e:
        print(f"❌ Error updating workout: {e}")
        raise HTTPException(status_code=500, detail="Failed to update workout")

    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout

@router.delete("/{workout_id}")
async def delete_workout(workout_id: str, user_id: str = Depends(get_current_user_id)):
    """Delete a workout together with its exercises"""
    try:
        supabase_service = get_supabase_service()

        workout = await supabase_service.get_workout(workout_id, user_id)
        if not workout:
            raise HTTPException(status_code=404, detail="Workout not found")

        await supabase_service.delete_workout(workout_id, user_id)
        return {"success": True}

    except HTTPException:
        raise
    except Exception as e:
        print(f"❌ Error deleting workout: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete workout")
