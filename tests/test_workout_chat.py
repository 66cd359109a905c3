# tests/test_workout_chat.py
import json
import os
import unittest

import services.openai_service as openai_module
from helpers import ApiTestCase, StubOpenAIService, OTHER_USER_ID
from services.workout_chat_service import (
    FALLBACK_RESPONSE,
    build_exercise_context,
    extract_json_object,
    find_matching_exercise,
)


class TestExerciseMatching(unittest.TestCase):
    def test_search_term_inside_stored_name(self) -> None:
        exercises = [{'id': 'e1', 'name': 'Bench Press'}]
        self.assertEqual(find_matching_exercise(exercises, 'bench')['id'], 'e1')

    def test_stored_name_inside_search_term(self) -> None:
        exercises = [{'id': 'e1', 'name': 'bench'}]
        self.assertEqual(find_matching_exercise(exercises, 'Incline Bench Press')['id'], 'e1')

    def test_first_match_wins(self) -> None:
        exercises = [{'id': 'e1', 'name': 'Incline dumbbell press'}, {'id': 'e2', 'name': 'Bench press'}]
        self.assertEqual(find_matching_exercise(exercises, 'press')['id'], 'e1')

    def test_no_match(self) -> None:
        self.assertIsNone(find_matching_exercise([{'id': 'e1', 'name': 'Squats'}], 'curls'))

    def test_unnamed_rows_never_match(self) -> None:
        exercises = [{'id': 'e0', 'name': ''}, {'id': 'e1', 'name': None}, {'id': 'e2', 'name': 'Squats'}]
        self.assertEqual(find_matching_exercise(exercises, 'squats')['id'], 'e2')
        self.assertIsNone(find_matching_exercise(exercises, 'curls'))


class TestModelOutputParsing(unittest.TestCase):
    def test_json_surrounded_by_prose(self) -> None:
        text = 'Sure! Here you go:\n```json\n{"actions": [], "response": "ok"}\n```\nAnything else?'
        self.assertEqual(extract_json_object(text), {'actions': [], 'response': 'ok'})

    def test_no_json(self) -> None:
        self.assertIsNone(extract_json_object('I logged that for you.'))

    def test_broken_json(self) -> None:
        self.assertIsNone(extract_json_object('{"actions": [ {"type": "add", }'))

    def test_context_lists_cardio_and_lifts(self) -> None:
        context = build_exercise_context(
            {'name': 'Custom', 'tag': 'Cardio'},
            [
                {'name': 'Treadmill', 'sets': None, 'reps': None, 'weight': 20, 'unit': 'min'},
                {'name': 'Squats', 'sets': 4, 'reps': 8, 'weight': 100, 'unit': 'kg'},
            ],
        )
        self.assertIn('Workout: Custom (Cardio)', context)
        self.assertIn('- Treadmill: 20 min', context)
        self.assertIn('- Squats: 4 sets x 8 reps @ 100 kg', context)

    def test_context_for_empty_workout(self) -> None:
        context = build_exercise_context({'name': 'Custom', 'tag': 'Lifting'}, [])
        self.assertIn('No exercises in this workout yet.', context)


def model_reply(actions, response='Done!'):
    return 'Here is the update:\n' + json.dumps({'actions': actions, 'response': response})


class TestChatApi(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._saved_key = os.environ.get('OPENAI_API_KEY')
        os.environ['OPENAI_API_KEY'] = 'test-key'
        self.workout = self.add_workout(id='w1', name='Custom', notes=None)
        self.bench = self.add_exercise('w1', id='e1', name='Bench press', order=0)
        self.dips = self.add_exercise('w1', id='e2', name='Dips', order=1)

    def tearDown(self) -> None:
        if self._saved_key is None:
            os.environ.pop('OPENAI_API_KEY', None)
        else:
            os.environ['OPENAI_API_KEY'] = self._saved_key
        super().tearDown()

    def send(self, reply, message='did some work'):
        stub = StubOpenAIService(reply)
        openai_module.openai_service = stub
        resp = self.client.post(
            '/api/chat',
            json={
                'message': message,
                'workoutId': 'w1',
                'exercises': [self.bench, self.dips],
                'workout': self.workout,
            },
            headers=self.headers,
        )
        return resp, stub

    def test_missing_api_key(self) -> None:
        os.environ.pop('OPENAI_API_KEY', None)
        resp, _ = self.send(model_reply([]))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {'error': 'AI service not configured. Please add OPENAI_API_KEY.'})

    def test_requires_session(self) -> None:
        resp = self.client.post('/api/chat', json={'message': 'hi', 'workoutId': 'w1', 'workout': {}})
        self.assertEqual(resp.status_code, 401)

    def test_other_users_workout_is_not_found(self) -> None:
        self.add_workout(id='theirs', user_id=OTHER_USER_ID)
        openai_module.openai_service = StubOpenAIService(model_reply([]))
        resp = self.client.post(
            '/api/chat',
            json={'message': 'hi', 'workoutId': 'theirs', 'exercises': [], 'workout': {}},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 404)

    def test_message_and_context_reach_the_model(self) -> None:
        _, stub = self.send(model_reply([]), message='3x8 bench at 135')
        system_prompt, user_content = stub.calls[0]
        self.assertIn('set_workout', system_prompt)
        self.assertIn('- Bench press: 3 sets x 8 reps', user_content)
        self.assertTrue(user_content.endswith('User says: "3x8 bench at 135"'))

    def test_malformed_output_changes_nothing(self) -> None:
        before_exercises = self.db.rows('exercises')
        before_workouts = self.db.rows('workouts')

        resp, _ = self.send('Sorry, I logged three sets of bench for you.')
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body['response'], FALLBACK_RESPONSE)
        self.assertEqual(body['exercises'], [self.bench, self.dips])
        self.assertEqual(body['workout'], self.workout)
        self.assertEqual(self.db.rows('exercises'), before_exercises)
        self.assertEqual(self.db.rows('workouts'), before_workouts)

    def test_add_update_delete_in_order(self) -> None:
        resp, _ = self.send(model_reply([
            {'type': 'add', 'exercise': 'Cable flyes', 'sets': 3, 'reps': 12, 'weight': 30},
            {'type': 'update', 'exercise': 'bench', 'weight': 135},
            {'type': 'delete', 'exercise': 'dips'},
        ], response='Logged it!'))

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body['response'], 'Logged it!')
        self.assertEqual([e['name'] for e in body['exercises']], ['Bench press', 'Cable flyes'])

        stored = {e['name']: e for e in self.db.rows('exercises')}
        self.assertEqual(set(stored), {'Bench press', 'Cable flyes'})
        self.assertEqual(stored['Bench press']['weight'], 135)
        self.assertEqual(stored['Bench press']['sets'], 3)
        self.assertEqual(stored['Cable flyes']['order'], 2)
        self.assertEqual(stored['Cable flyes']['unit'], 'lbs')

    def test_add_defaults_sets_and_reps(self) -> None:
        self.send(model_reply([{'type': 'add', 'exercise': 'Pull ups'}]))
        pull_ups = [e for e in self.db.rows('exercises') if e['name'] == 'Pull ups'][0]
        self.assertEqual((pull_ups['sets'], pull_ups['reps'], pull_ups['weight']), (3, 8, None))

    def test_cardio_add_has_no_sets_or_reps(self) -> None:
        self.send(model_reply([
            {'type': 'add', 'exercise': 'Treadmill', 'sets': 1, 'reps': 1, 'weight': 20, 'unit': 'min'},
        ]))
        treadmill = [e for e in self.db.rows('exercises') if e['name'] == 'Treadmill'][0]
        self.assertIsNone(treadmill['sets'])
        self.assertIsNone(treadmill['reps'])
        self.assertEqual((treadmill['weight'], treadmill['unit']), (20, 'min'))

    def test_update_to_cardio_unit_clears_sets_and_reps(self) -> None:
        self.send(model_reply([{'type': 'update', 'exercise': 'Dips', 'weight': 5, 'unit': 'miles'}]))
        dips = [e for e in self.db.rows('exercises') if e['id'] == 'e2'][0]
        self.assertEqual((dips['sets'], dips['reps'], dips['weight'], dips['unit']), (None, None, 5, 'miles'))

    def test_update_only_touches_given_fields(self) -> None:
        self.send(model_reply([{'type': 'update', 'exercise': 'Bench', 'sets': 5}]))
        bench = [e for e in self.db.rows('exercises') if e['id'] == 'e1'][0]
        self.assertEqual((bench['sets'], bench['reps'], bench['unit']), (5, 8, 'lbs'))

    def test_notes_append(self) -> None:
        resp, _ = self.send(model_reply([
            {'type': 'note', 'content': 'Shoulder felt tight'},
            {'type': 'note', 'content': 'Go lighter next time'},
        ]))
        expected = 'Shoulder felt tight\nGo lighter next time'
        self.assertEqual(resp.json()['workout']['notes'], expected)
        self.assertEqual(self.db.rows('workouts')[0]['notes'], expected)

    def test_rename_exercise_and_set_workout(self) -> None:
        resp, _ = self.send(model_reply([
            {'type': 'rename', 'exercise': 'dips', 'new_name': 'Weighted dips'},
            {'type': 'set_workout', 'name': 'Push Day', 'tag': 'Lifting'},
        ]))
        body = resp.json()
        self.assertEqual(body['workout']['name'], 'Push Day')
        self.assertIn('Weighted dips', [e['name'] for e in body['exercises']])
        self.assertEqual(self.db.rows('workouts')[0]['name'], 'Push Day')

    def test_failed_action_is_skipped(self) -> None:
        self.db.fail('exercises', 'insert')
        resp, _ = self.send(model_reply([
            {'type': 'add', 'exercise': 'Cable flyes'},
            {'type': 'delete', 'exercise': 'Dips'},
        ]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([e['name'] for e in resp.json()['exercises']], ['Bench press'])
        self.assertEqual([e['id'] for e in self.db.rows('exercises')], ['e1'])

    def test_unknown_and_incomplete_actions_are_ignored(self) -> None:
        resp, _ = self.send(model_reply([
            {'type': 'dance'},
            {'type': 'delete'},
            {'type': 'update', 'exercise': 'Deadlift', 'sets': 5},
            {'sets': 3},
        ]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()['exercises']), 2)
        self.assertEqual(len(self.db.rows('exercises')), 2)

    def test_delete_with_unsaved_rows_in_context(self) -> None:
        stub = StubOpenAIService(model_reply([{'type': 'delete', 'exercise': 'bench'}]))
        openai_module.openai_service = stub
        resp = self.client.post(
            '/api/chat',
            json={
                'message': 'skipped bench',
                'workoutId': 'w1',
                'exercises': [self.bench, {'name': 'Squats'}],
                'workout': self.workout,
            },
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([e['name'] for e in resp.json()['exercises']], ['Squats'])
        self.assertEqual([e['id'] for e in self.db.rows('exercises')], ['e2'])

    def test_rename_with_unsaved_rows_in_context(self) -> None:
        openai_module.openai_service = StubOpenAIService(
            model_reply([{'type': 'rename', 'exercise': 'bench', 'new_name': 'Paused bench'}])
        )
        resp = self.client.post(
            '/api/chat',
            json={
                'message': 'bench was paused',
                'workoutId': 'w1',
                'exercises': [{'name': 'Squats'}, self.bench],
                'workout': self.workout,
            },
            headers=self.headers,
        )
        self.assertEqual([e['name'] for e in resp.json()['exercises']], ['Squats', 'Paused bench'])

    def test_model_failure_is_generic(self) -> None:
        resp, _ = self.send(RuntimeError('upstream timed out'))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {'error': 'Failed to process your message'})


if __name__ == '__main__':
    unittest.main()
