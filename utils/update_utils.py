# utils/update_utils.py
from typing import Dict, Any, List

def sanitize_updates(updates: Dict[str, Any], allowed_fields: List[str]) -> Dict[str, Any]:
    """Keep only allow-listed fields; anything else is dropped silently"""
    return {field: updates[field] for field in allowed_fields if field in updates}
