# api/users.py
from fastapi import APIRouter, HTTPException, Depends, Request
from datetime import datetime, timezone
import bcrypt

from models.schemas import UserCreate, UserResponse, UserLogin, UserLoginResponse
from services.supabase_service import get_supabase_service
from utils.auth import get_current_user_id, get_token_from_request

router = APIRouter()

def hash_password(password: str) -> str:
    """Hash password with bcrypt"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

def verify_password(password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))

def to_user_response(user: dict) -> UserResponse:
    return UserResponse(
        id=user['id'],
        name=user['name'],
        email=user['email'],
        created_at=user.get('created_at')
    )

@router.post("/register", response_model=UserLoginResponse)
async def register_user(user_data: UserCreate):
    """Register a new user and start a session"""
    supabase_service = get_supabase_service()

    try:
        existing_user = await supabase_service.get_user_by_email(user_data.email)
    except Exception as e:
        print(f"❌ Error checking existing user: {e}")
        raise HTTPException(status_code=500, detail="Failed to register user")

    if existing_user:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    try:
        print(f"🔍 Registering user: {user_data.email}")
        now = datetime.now(timezone.utc).isoformat()

        # Only the hash is stored, never the plain password
        created_user = await supabase_service.create_user({
            'name': user_data.name,
            'email': user_data.email,
            'password_hash': hash_password(user_data.password),
            'created_at': now,
            'updated_at': now
        })
        token = await supabase_service.create_session(created_user['id'])

    except Exception as e:
        print(f"❌ Error registering user: {e}")
        raise HTTPException(status_code=500, detail="Failed to register user")

    return UserLoginResponse(
        success=True,
        token=token,
        user=to_user_response(created_user),
        message="User registered successfully"
    )

@router.post("/login", response_model=UserLoginResponse)
async def login_user(login_data: UserLogin):
    """Exchange email and password for a session token"""
    print(f"🔍 Login attempt for: {login_data.email}")
    supabase_service = get_supabase_service()

    try:
        user = await supabase_service.get_user_by_email(login_data.email)
    except Exception as e:
        print(f"❌ Error during login: {e}")
        raise HTTPException(status_code=500, detail="Failed to log in")

    if not user or not verify_password(login_data.password, user['password_hash']):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    try:
        token = await supabase_service.create_session(user['id'])
    except Exception as e:
        print(f"❌ Error during login: {e}")
        raise HTTPException(status_code=500, detail="Failed to log in")

    return UserLoginResponse(
        success=True,
        token=token,
        user=to_user_response(user),
        message="Login successful"
    )

@router.post("/logout")
async def logout_user(request: Request, user_id: str = Depends(get_current_user_id)):
    supabase_service = get_supabase_service()
    await supabase_service.delete_session(get_token_from_request(request))
    return {"success": True}

@router.get("/me", response_model=UserResponse)
async def get_me(user_id: str = Depends(get_current_user_id)):
    """The authenticated user's profile"""
    supabase_service = get_supabase_service()
    try:
        user = await supabase_service.get_user_by_id(user_id)
    except Exception as e:
        print(f"❌ Error fetching user: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user")

    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return to_user_response(user)
