# utils/auth.py
from typing import Optional
from fastapi import HTTPException, Request
from services.supabase_service import get_supabase_service

SESSION_COOKIE_NAME = "session_token"

def get_token_from_request(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie"""
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    return request.cookies.get(SESSION_COOKIE_NAME) or None

async def get_current_user_id(request: Request) -> str:
    """FastAPI dependency: the authenticated user's id, or 401"""
    token = get_token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        user_id = await get_supabase_service().get_session_user_id(token)
    except Exception as e:
        print(f"❌ Error verifying session: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify session")

    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return user_id
