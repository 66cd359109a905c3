# models/workout_schemas.py
from pydantic import BaseModel, Field
from typing import Optional

# Fields a client may change on an existing workout
WORKOUT_UPDATE_FIELDS = ['name', 'tag', 'date', 'notes']

class WorkoutCreate(BaseModel):
    template_id: Optional[str] = Field(default=None, alias='templateId')

class WorkoutResponse(BaseModel):
    id: str
    user_id: str
    name: str
    tag: str
    date: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
