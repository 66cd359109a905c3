# services/supabase_service.py
from supabase import create_client, Client
import os
import secrets
import uuid
from typing import Dict, List, Optional, Any
from datetime import datetime, timezone

class SupabaseService:
    def __init__(self, client: Optional[Client] = None):
        if client is None:
            url = os.getenv("SUPABASE_URL")
            key = os.getenv("SUPABASE_SERVICE_KEY")

            if not url or not key:
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in environment variables")

            client = create_client(url, key)

        self.client: Client = client
        print("✅ Supabase client initialized")

    # User Management Operations
    async def create_user(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new user in the database"""
        try:
            print(f"🔍 Creating user in Supabase: {user_data.get('email')}")

            # Ensure we have an ID
            if 'id' not in user_data:
                user_data['id'] = str(uuid.uuid4())

            response = self.client.table('users').insert(user_data).execute()

            if response.data:
                print(f"✅ User created successfully: {response.data[0]['id']}")
                return response.data[0]
            else:
                raise Exception("No data returned from Supabase")

        except Exception as e:
            print(f"❌ Error creating user in Supabase: {e}")
            raise Exception(f"Failed to create user: {str(e)}")

    async def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get user by ID from database"""
        try:
            response = self.client.table('users') \
                .select("*") \
                .eq('id', user_id) \
                .execute()

            return response.data[0] if response.data else None

        except Exception as e:
            print(f"❌ Supabase fetch error: {str(e)}")
            raise

    async def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get user by email"""
        try:
            print(f"🔍 Getting user by email: {email}")

            response = self.client.table('users').select('*').eq('email', email).execute()

            if response.data:
                print(f"✅ User found by email: {email}")
                return response.data[0]
            else:
                print(f"❌ User not found by email: {email}")
                return None

        except Exception as e:
            print(f"❌ Error getting user by email: {e}")
            raise

    # Session Operations
    async def create_session(self, user_id: str) -> str:
        """Mint a session token for the user"""
        token = secrets.token_urlsafe(32)
        try:
            self.client.table('sessions').insert({
                'token': token,
                'user_id': user_id,
                'created_at': datetime.now(timezone.utc).isoformat()
            }).execute()
            return token
        except Exception as e:
            print(f"❌ Error creating session: {e}")
            raise

    async def get_session_user_id(self, token: str) -> Optional[str]:
        """Resolve a session token to its user id"""
        try:
            response = self.client.table('sessions') \
                .select('user_id') \
                .eq('token', token) \
                .execute()

            return response.data[0]['user_id'] if response.data else None

        except Exception as e:
            print(f"❌ Error resolving session: {e}")
            raise

    async def delete_session(self, token: str) -> bool:
        try:
            self.client.table('sessions').delete().eq('token', token).execute()
            return True
        except Exception as e:
            print(f"❌ Error deleting session: {e}")
            return False

    # Workout Operations
    async def get_workouts(self, user_id: str) -> List[Dict[str, Any]]:
        """Get all workouts for a user, newest first"""
        try:
            response = self.client.table('workouts')\
                .select('*')\
                .eq('user_id', user_id)\
                .order('date', desc=True)\
                .order('created_at', desc=True)\
                .execute()

            return response.data or []

        except Exception as e:
            print(f"❌ Error fetching workouts: {e}")
            raise

    async def get_workouts_since(self, user_id: str, start_date: str) -> List[Dict[str, Any]]:
        """Get a user's workouts dated on or after start_date, oldest first"""
        try:
            response = self.client.table('workouts')\
                .select('*')\
                .eq('user_id', user_id)\
                .gte('date', start_date)\
                .order('date')\
                .execute()

            return response.data or []

        except Exception as e:
            print(f"❌ Error fetching workouts since {start_date}: {e}")
            raise

    async def get_workout(self, workout_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a single workout owned by the user"""
        try:
            response = self.client.table('workouts')\
                .select('*')\
                .eq('id', workout_id)\
                .eq('user_id', user_id)\
                .execute()

            return response.data[0] if response.data else None

        except Exception as e:
            print(f"❌ Error fetching workout {workout_id}: {e}")
            raise

    async def create_workout(self, workout_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            print(f"🔍 Creating workout: {workout_data.get('name')} on {workout_data.get('date')}")

            response = self.client.table('workouts').insert(workout_data).execute()

            if response.data:
                print(f"✅ Workout created: {response.data[0]['id']}")
                return response.data[0]
            else:
                raise Exception("No data returned from insert")

        except Exception as e:
            print(f"❌ Error creating workout: {e}")
            raise

    async def update_workout(self, workout_id: str, user_id: str, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update a workout; returns None when the user has no such workout"""
        try:
            response = self.client.table('workouts')\
                .update(update_data)\
                .eq('id', workout_id)\
                .eq('user_id', user_id)\
                .execute()

            return response.data[0] if response.data else None

        except Exception as e:
            print(f"❌ Error updating workout: {e}")
            raise

    async def delete_workout(self, workout_id: str, user_id: str) -> bool:
        """Delete a workout and its exercises.

        The exercises table does not cascade, so exercise rows go first.
        """
        try:
            self.client.table('exercises')\
                .delete()\
                .eq('workout_id', workout_id)\
                .execute()

            self.client.table('workouts')\
                .delete()\
                .eq('id', workout_id)\
                .eq('user_id', user_id)\
                .execute()

            print(f"✅ Workout deleted: {workout_id}")
            return True

        except Exception as e:
            print(f"❌ Error deleting workout: {e}")
            raise

    # Exercise Operations
    async def get_exercises(self, workout_id: str) -> List[Dict[str, Any]]:
        """Get exercises of a workout in display order"""
        try:
            response = self.client.table('exercises')\
                .select('*')\
                .eq('workout_id', workout_id)\
                .order('order')\
                .execute()

            return response.data or []

        except Exception as e:
            print(f"❌ Error fetching exercises: {e}")
            raise

    async def get_exercises_for_workouts(self, workout_ids: List[str]) -> List[Dict[str, Any]]:
        if not workout_ids:
            return []
        try:
            response = self.client.table('exercises')\
                .select('*')\
                .in_('workout_id', workout_ids)\
                .execute()

            return response.data or []

        except Exception as e:
            print(f"❌ Error fetching exercises for {len(workout_ids)} workouts: {e}")
            raise

    async def create_exercise(self, exercise_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table('exercises').insert(exercise_data).execute()

            if response.data:
                return response.data[0]
            else:
                raise Exception("No data returned from insert")

        except Exception as e:
            print(f"❌ Error creating exercise: {e}")
            raise

    async def create_exercises(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Bulk insert exercise rows"""
        try:
            response = self.client.table('exercises').insert(rows).execute()
            return response.data or []
        except Exception as e:
            print(f"❌ Error creating exercises: {e}")
            raise

    async def update_exercise(self, exercise_id: str, workout_id: str, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update an exercise within a workout; returns None when it does not exist"""
        try:
            response = self.client.table('exercises')\
                .update(update_data)\
                .eq('id', exercise_id)\
                .eq('workout_id', workout_id)\
                .execute()

            return response.data[0] if response.data else None

        except Exception as e:
            print(f"❌ Error updating exercise: {e}")
            raise

    async def get_exercise(self, exercise_id: str, workout_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.client.table('exercises')\
                .select('*')\
                .eq('id', exercise_id)\
                .eq('workout_id', workout_id)\
                .execute()

            return response.data[0] if response.data else None

        except Exception as e:
            print(f"❌ Error fetching exercise {exercise_id}: {e}")
            raise

    async def delete_exercise(self, exercise_id: str, workout_id: str) -> bool:
        try:
            self.client.table('exercises')\
                .delete()\
                .eq('id', exercise_id)\
                .eq('workout_id', workout_id)\
                .execute()

            return True

        except Exception as e:
            print(f"❌ Error deleting exercise: {e}")
            raise

    async def health_check(self) -> Dict[str, Any]:
        """Check database connectivity"""
        try:
            self.client.table('workouts').select('id').limit(1).execute()
            return {"status": "healthy", "message": "Supabase connection is working"}
        except Exception as e:
            return {"status": "unhealthy", "message": f"Supabase error: {str(e)}"}

# Global instance - we'll initialize this in main.py
supabase_service = None

def get_supabase_service() -> SupabaseService:
    """Get the global Supabase service instance"""
    global supabase_service
    if supabase_service is None:
        supabase_service = SupabaseService()
    return supabase_service

def init_supabase_service():
    """Initialize the global Supabase service"""
    global supabase_service
    supabase_service = SupabaseService()
    return supabase_service
