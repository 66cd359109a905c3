# services/workout_chat_service.py
import json
from typing import Dict, Any, List, Optional
from pydantic import ValidationError
from models.chat import ChatAction, ACTION_TYPES
from models.exercise_schemas import VALID_UNITS, DEFAULT_UNIT, is_cardio_unit
from services.supabase_service import get_supabase_service
from services.openai_service import get_openai_service

FALLBACK_RESPONSE = "I had trouble understanding that. Could you rephrase it?"

DEFAULT_SETS = 3
DEFAULT_REPS = 8

UNIT_LIST = ", ".join(VALID_UNITS)

SYSTEM_PROMPT = f"""You are a fitness tracking assistant. Your job is to parse natural language workout commands and convert them into structured actions.

The user is logging their workout. They will tell you what exercises they did: sets, reps and weight for lifting, or a duration, distance or calorie count for cardio.

You must respond with valid JSON in this exact format:
{{
  "actions": [
    {{"type": "add", "exercise": "Exercise Name", "sets": 3, "reps": 8, "weight": 135, "unit": "lbs"}},
    {{"type": "add", "exercise": "Treadmill", "weight": 20, "unit": "min"}},
    {{"type": "update", "exercise": "Exercise Name", "sets": 4}},
    {{"type": "delete", "exercise": "Exercise Name"}},
    {{"type": "note", "content": "Note text here"}},
    {{"type": "rename", "exercise": "Old Name", "new_name": "New Name"}},
    {{"type": "set_workout", "name": "Push Day", "tag": "Lifting"}}
  ],
  "response": "A brief, friendly confirmation of what you did"
}}

Action types:
- "add": Add a new exercise with sets, reps, and optionally weight and unit
- "update": Update an existing exercise (only include fields that are changing)
- "delete": Remove an exercise from the workout
- "note": Add a note to the workout
- "rename": Rename an existing exercise
- "set_workout": Change the workout's name and/or tag

Units: {UNIT_LIST}
- Use "lbs" or "kg" for weighted lifts and "bodyweight" for unweighted ones
- For cardio use "min", "sec", "miles", "km" or "cal"; put the amount in "weight" and leave out sets and reps

Rules:
1. Parse common workout notation like "3x8" (3 sets of 8 reps), "3 sets of 8", etc.
2. Weight is optional - only include if specified
3. Weight is in lbs unless the user says kg
4. For updates, match the exercise name flexibly (e.g., "bench" should match "Bench press")
5. If user says they "skipped" an exercise, delete it
6. If the workout is still called "Custom", use set_workout to give it a fitting name and tag
7. Keep responses brief and gym-friendly
8. If you can't understand the request, still return valid JSON with an empty actions array and helpful response
9. Always maintain proper JSON format with double quotes

Current exercises in the workout will be provided for context."""

def find_matching_exercise(exercises: List[Dict[str, Any]], search: str) -> Optional[Dict[str, Any]]:
    """First exercise whose name contains, or is contained in, the search term (case-insensitive)"""
    search_name = search.lower()
    for exercise in exercises:
        name = (exercise.get('name') or '').lower()
        if not name:
            continue
        if search_name in name or name in search_name:
            return exercise
    return None

def format_exercise_line(exercise: Dict[str, Any]) -> str:
    unit = exercise.get('unit') or DEFAULT_UNIT
    if is_cardio_unit(unit):
        return f"- {exercise.get('name')}: {exercise.get('weight')} {unit}"

    line = f"- {exercise.get('name')}: {exercise.get('sets')} sets x {exercise.get('reps')} reps"
    if exercise.get('weight'):
        line += f" @ {exercise['weight']} {unit}"
    return line

def build_exercise_context(workout: Dict[str, Any], exercises: List[Dict[str, Any]]) -> str:
    header = f"Workout: {workout.get('name', 'Workout')} ({workout.get('tag', 'Lifting')})"
    if not exercises:
        return f"{header}\nNo exercises in this workout yet."
    lines = "\n".join(format_exercise_line(e) for e in exercises)
    return f"{header}\nCurrent exercises in this workout:\n{lines}"

def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Decode the outermost {...} span of a model reply, ignoring surrounding prose"""
    start = text.find('{')
    end = text.rfind('}')
    if start == -1 or end <= start:
        return None
    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None

def parse_actions(raw_actions: List[Any]) -> List[ChatAction]:
    actions = []
    for raw in raw_actions:
        if not isinstance(raw, dict):
            continue
        try:
            action = ChatAction(**raw)
        except ValidationError as e:
            print(f"⚠️ Skipping malformed action {raw}: {e}")
            continue
        if action.type not in ACTION_TYPES:
            print(f"⚠️ Skipping unknown action type: {action.type}")
            continue
        actions.append(action)
    return actions

class WorkoutChatService:
    def __init__(self, supabase_service=None, openai_service=None):
        self.supabase_service = supabase_service or get_supabase_service()
        self.openai_service = openai_service or get_openai_service()

    async def process_message(
        self,
        user_id: str,
        workout_id: str,
        message: str,
        exercises: List[Dict[str, Any]],
        workout: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Turn a free-text message into workout edits.

        The caller's exercises and workout are the base state; the returned
        dict carries the model's reply plus the state after every action that
        succeeded. Unparseable model output leaves everything untouched.
        """
        print(f"💬 Workout chat for {workout_id}: {message[:100]}")

        user_content = f'{build_exercise_context(workout, exercises)}\n\nUser says: "{message}"'
        reply = await self.openai_service.parse_workout_command(SYSTEM_PROMPT, user_content)

        data = extract_json_object(reply)
        if data is None or not isinstance(data.get('actions', []), list):
            print(f"❌ Error parsing AI response: {reply}")
            return {
                'response': FALLBACK_RESPONSE,
                'exercises': exercises,
                'workout': workout
            }

        actions = parse_actions(data.get('actions', []))
        updated_exercises, updated_workout = await self.apply_actions(
            user_id, workout_id, actions, exercises, workout
        )

        return {
            'response': str(data.get('response') or ''),
            'exercises': updated_exercises,
            'workout': updated_workout
        }

    async def apply_actions(
        self,
        user_id: str,
        workout_id: str,
        actions: List[ChatAction],
        exercises: List[Dict[str, Any]],
        workout: Dict[str, Any]
    ):
        """Apply actions in order; a failed action is logged and skipped"""
        handlers = {
            'add': self._apply_add,
            'update': self._apply_update,
            'delete': self._apply_delete,
            'note': self._apply_note,
            'rename': self._apply_rename,
            'set_workout': self._apply_set_workout,
        }

        updated_exercises = list(exercises)
        updated_workout = dict(workout)

        for action in actions:
            try:
                updated_exercises, updated_workout = await handlers[action.type](
                    user_id, workout_id, action, updated_exercises, updated_workout
                )
            except Exception as e:
                print(f"❌ Error applying {action.type} action: {e}")

        print(f"✅ Applied {len(actions)} actions, {len(updated_exercises)} exercises now")
        return updated_exercises, updated_workout

    async def _apply_add(self, user_id, workout_id, action, exercises, workout):
        if not action.exercise:
            return exercises, workout

        unit = action.unit or DEFAULT_UNIT
        cardio = is_cardio_unit(unit)
        created = await self.supabase_service.create_exercise({
            'workout_id': workout_id,
            'name': action.exercise,
            'sets': None if cardio else (action.sets or DEFAULT_SETS),
            'reps': None if cardio else (action.reps or DEFAULT_REPS),
            'weight': action.weight,
            'unit': unit,
            'order': len(exercises)
        })
        return exercises + [created], workout

    async def _apply_update(self, user_id, workout_id, action, exercises, workout):
        if not action.exercise:
            return exercises, workout

        match = find_matching_exercise(exercises, action.exercise)
        if not match:
            print(f"⚠️ No exercise matching '{action.exercise}' to update")
            return exercises, workout

        provided = action.model_dump(include={'sets', 'reps', 'weight', 'unit'}, exclude_unset=True)
        if 'unit' in provided and not provided['unit']:
            del provided['unit']
        unit = provided.get('unit', match.get('unit') or DEFAULT_UNIT)
        if is_cardio_unit(unit):
            provided['sets'] = None
            provided['reps'] = None

        if not provided:
            return exercises, workout

        updated = await self.supabase_service.update_exercise(match['id'], workout_id, provided)
        if not updated:
            return exercises, workout
        return _replace_exercise(exercises, updated), workout

    async def _apply_delete(self, user_id, workout_id, action, exercises, workout):
        if not action.exercise:
            return exercises, workout

        match = find_matching_exercise(exercises, action.exercise)
        if not match:
            print(f"⚠️ No exercise matching '{action.exercise}' to delete")
            return exercises, workout

        remaining = [e for e in exercises if e.get('id') != match['id']]
        await self.supabase_service.delete_exercise(match['id'], workout_id)
        return remaining, workout

    async def _apply_note(self, user_id, workout_id, action, exercises, workout):
        if not action.content:
            return exercises, workout

        notes = workout.get('notes')
        new_notes = f"{notes}\n{action.content}" if notes else action.content
        return exercises, await self._update_workout(user_id, workout_id, {'notes': new_notes}, workout)

    async def _apply_rename(self, user_id, workout_id, action, exercises, workout):
        if not action.exercise or not action.new_name:
            return exercises, workout

        match = find_matching_exercise(exercises, action.exercise)
        if not match:
            print(f"⚠️ No exercise matching '{action.exercise}' to rename")
            return exercises, workout

        updated = await self.supabase_service.update_exercise(match['id'], workout_id, {'name': action.new_name})
        if not updated:
            return exercises, workout
        return _replace_exercise(exercises, updated), workout

    async def _apply_set_workout(self, user_id, workout_id, action, exercises, workout):
        updates = {}
        if action.name:
            updates['name'] = action.name
        if action.tag:
            updates['tag'] = action.tag
        if not updates:
            return exercises, workout
        return exercises, await self._update_workout(user_id, workout_id, updates, workout)

    async def _update_workout(self, user_id, workout_id, updates, workout):
        updated = await self.supabase_service.update_workout(workout_id, user_id, updates)
        return updated if updated else workout

def _replace_exercise(exercises: List[Dict[str, Any]], updated: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [updated if e.get('id') == updated['id'] else e for e in exercises]
