# tests/helpers.py
import unittest

from fastapi.testclient import TestClient

import services.openai_service as openai_module
import services.supabase_service as supabase_module
from fake_supabase import FakeSupabaseClient
from main import app
from services.supabase_service import SupabaseService

USER_ID = 'user-1'
OTHER_USER_ID = 'user-2'
TOKEN = 'test-token'


class StubOpenAIService:
    """Returns a canned model reply and records what it was sent"""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    async def parse_workout_command(self, system_prompt, user_content):
        self.calls.append((system_prompt, user_content))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = FakeSupabaseClient({
            'users': [{'id': USER_ID, 'name': 'Sam', 'email': 'sam@gmail.com', 'password_hash': 'x'}],
            'sessions': [{'token': TOKEN, 'user_id': USER_ID}],
        })
        supabase_module.supabase_service = SupabaseService(client=self.db)
        self.client = TestClient(app)
        self.headers = {'Authorization': f'Bearer {TOKEN}'}

    def tearDown(self) -> None:
        supabase_module.supabase_service = None
        openai_module.openai_service = None
        self.client.close()

    def add_workout(self, **fields):
        row = {
            'id': fields.pop('id', f"w{len(self.db.rows('workouts')) + 1}"),
            'user_id': USER_ID,
            'name': 'Chest Day',
            'tag': 'Lifting',
            'date': '2026-01-01',
            'notes': None,
            'created_at': self.db.next_timestamp(),
        }
        row.update(fields)
        self.db.tables.setdefault('workouts', []).append(row)
        return dict(row)

    def add_exercise(self, workout_id, **fields):
        row = {
            'id': fields.pop('id', f"e{len(self.db.rows('exercises')) + 1}"),
            'workout_id': workout_id,
            'name': 'Bench press',
            'sets': 3,
            'reps': 8,
            'weight': None,
            'unit': 'lbs',
            'order': 0,
            'created_at': self.db.next_timestamp(),
        }
        row.update(fields)
        self.db.tables.setdefault('exercises', []).append(row)
        return dict(row)
