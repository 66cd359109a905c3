# api/templates.py
from fastapi import APIRouter, Depends

from services.templates import WORKOUT_TEMPLATES, AVAILABLE_TAGS
from utils.auth import get_current_user_id

router = APIRouter()

@router.get("")
async def list_templates(user_id: str = Depends(get_current_user_id)):
    """Workout templates offered when starting a workout, plus the tag palette"""
    return {"templates": WORKOUT_TEMPLATES, "tags": AVAILABLE_TAGS}
