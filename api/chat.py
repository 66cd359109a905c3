# api/chat.py
from fastapi import APIRouter, HTTPException, Depends
import os

from models.chat import ChatRequest, ChatResponse
from services.supabase_service import get_supabase_service
from services.openai_service import get_openai_service
from services.workout_chat_service import WorkoutChatService
from utils.auth import get_current_user_id

router = APIRouter()

@router.post("", response_model=ChatResponse)
async def workout_chat(request: ChatRequest, user_id: str = Depends(get_current_user_id)):
    """Edit a workout log from a natural-language message"""
    if not os.getenv("OPENAI_API_KEY"):
        raise HTTPException(
            status_code=500,
            detail="AI service not configured. Please add OPENAI_API_KEY."
        )

    try:
        supabase_service = get_supabase_service()

        workout = await supabase_service.get_workout(request.workout_id, user_id)
        if not workout:
            raise HTTPException(status_code=404, detail="Workout not found")

        chat_service = WorkoutChatService(supabase_service, get_openai_service())
        return await chat_service.process_message(
            user_id=user_id,
            workout_id=request.workout_id,
            message=request.message,
            exercises=request.exercises,
            workout=request.workout
        )

    except HTTPException:
        raise
    except Exception as e:
        print(f"❌ Error in chat API: {e}")
        import traceback
        traceback.print_exc()
        raise HTTPException(status_code=500, detail="Failed to process your message")
