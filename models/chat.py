# models/chat.py
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

ACTION_TYPES = ['add', 'update', 'delete', 'note', 'rename', 'set_workout']

class ChatRequest(BaseModel):
    message: str
    workout_id: str = Field(alias='workoutId')
    exercises: List[Dict[str, Any]] = []
    workout: Dict[str, Any]

class ChatAction(BaseModel):
    """One state mutation proposed by the model"""
    type: str
    exercise: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    unit: Optional[str] = None
    content: Optional[str] = None
    new_name: Optional[str] = None
    name: Optional[str] = None
    tag: Optional[str] = None

class ChatResponse(BaseModel):
    response: str
    exercises: List[Dict[str, Any]]
    workout: Dict[str, Any]
