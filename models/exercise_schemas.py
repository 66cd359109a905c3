# models/exercise_schemas.py
from pydantic import BaseModel
from typing import Optional

VALID_UNITS = ['lbs', 'kg', 'min', 'sec', 'miles', 'km', 'cal', 'bodyweight']

# Units whose "weight" is a duration, distance or calorie count rather than a load
CARDIO_UNITS = {'min', 'sec', 'miles', 'km', 'cal'}

DEFAULT_UNIT = 'lbs'

# Fields a client may change on an existing exercise
EXERCISE_UPDATE_FIELDS = ['name', 'sets', 'reps', 'weight', 'unit', 'order']

def is_cardio_unit(unit: Optional[str]) -> bool:
    return unit in CARDIO_UNITS

class ExerciseCreate(BaseModel):
    name: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    unit: Optional[str] = None
    order: Optional[int] = None

class ExerciseResponse(BaseModel):
    id: str
    workout_id: str
    name: str
    sets: Optional[int]
    reps: Optional[int]
    weight: Optional[float]
    unit: Optional[str] = DEFAULT_UNIT
    order: int
    created_at: Optional[str] = None
