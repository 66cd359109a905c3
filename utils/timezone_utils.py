# utils/timezone_utils.py
from datetime import datetime, date, timedelta, timezone
from typing import Optional
from fastapi import Header

def parse_timezone_offset(offset_str: Optional[str]) -> int:
    """
    Parse timezone offset from various formats.
    Examples: "300" (minutes), "+05:00", "-08:00"
    """
    if not offset_str:
        return 0

    try:
        # If it's already in minutes
        if offset_str.lstrip('+-').isdigit():
            return int(offset_str)

        # If it's in format "+05:00" or "-08:00"
        if ':' in offset_str:
            sign = -1 if offset_str.startswith('-') else 1
            parts = offset_str.lstrip('+-').split(':')
            hours = int(parts[0])
            minutes = int(parts[1]) if len(parts) > 1 else 0
            return sign * (hours * 60 + minutes)
    except ValueError:
        print(f"⚠️ Could not parse timezone offset: {offset_str}")

    return 0

def get_user_now(timezone_offset: int = 0) -> datetime:
    """Get current datetime in user's timezone."""
    utc_now = datetime.now(timezone.utc)
    return utc_now + timedelta(minutes=timezone_offset)

def get_user_today(timezone_offset: int = 0) -> date:
    """Get today's date in user's timezone."""
    return get_user_now(timezone_offset).date()

def parse_workout_date(value) -> date:
    """Workout dates are stored as YYYY-MM-DD; tolerate full timestamps."""
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()

# FastAPI dependency to extract timezone from headers
async def get_timezone_offset(
    x_timezone_offset: Optional[str] = Header(None),
    x_timezone_string: Optional[str] = Header(None)
) -> int:
    """
    Extract timezone offset from request headers.
    Returns offset in minutes from UTC.
    """
    # Try the direct offset first
    if x_timezone_offset:
        return parse_timezone_offset(x_timezone_offset)

    # Try parsing the string format
    if x_timezone_string:
        return parse_timezone_offset(x_timezone_string)

    # Default to UTC
    return 0
