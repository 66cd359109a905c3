# services/templates.py
from typing import Dict, Any, List, Optional

WORKOUT_TEMPLATES: List[Dict[str, Any]] = [
    {
        'id': 'back-day',
        'name': 'Back Day',
        'tag': 'Lifting',
        'exercises': [
            {'name': 'Pull ups', 'sets': 3, 'reps': 8, 'weight': None},
            {'name': 'Face pulls', 'sets': 3, 'reps': 12, 'weight': None},
            {'name': 'Dumbbell curls', 'sets': 3, 'reps': 10, 'weight': None},
            {'name': 'Rows', 'sets': 3, 'reps': 8, 'weight': None},
        ],
    },
    {
        'id': 'chest-day',
        'name': 'Chest Day',
        'tag': 'Lifting',
        'exercises': [
            {'name': 'Bench press', 'sets': 3, 'reps': 8, 'weight': None},
            {'name': 'Incline dumbbell press', 'sets': 3, 'reps': 10, 'weight': None},
            {'name': 'Cable flyes', 'sets': 3, 'reps': 12, 'weight': None},
            {'name': 'Dips', 'sets': 3, 'reps': 10, 'weight': None},
        ],
    },
    {
        'id': 'leg-day',
        'name': 'Leg Day',
        'tag': 'Lifting',
        'exercises': [
            {'name': 'Squats', 'sets': 4, 'reps': 8, 'weight': None},
            {'name': 'Romanian deadlifts', 'sets': 3, 'reps': 10, 'weight': None},
            {'name': 'Leg press', 'sets': 3, 'reps': 12, 'weight': None},
            {'name': 'Calf raises', 'sets': 4, 'reps': 15, 'weight': None},
        ],
    },
    # Empty placeholder; chat fills it in and renames it with set_workout
    {
        'id': 'custom',
        'name': 'Custom',
        'tag': 'Lifting',
        'exercises': [],
    },
]

AVAILABLE_TAGS = ['Lifting', 'Cardio', 'HIIT', 'Stretching', 'Sports']

def get_template(template_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Look up a workout template by id"""
    for template in WORKOUT_TEMPLATES:
        if template['id'] == template_id:
            return template
    return None

def build_template_exercises(template: Dict[str, Any], workout_id: str) -> List[Dict[str, Any]]:
    """Exercise rows for a new workout, ordered as listed in the template"""
    return [
        {
            'workout_id': workout_id,
            'name': exercise['name'],
            'sets': exercise['sets'],
            'reps': exercise['reps'],
            'weight': exercise['weight'],
            'unit': exercise.get('unit', 'lbs'),
            'order': index,
        }
        for index, exercise in enumerate(template['exercises'])
    ]
