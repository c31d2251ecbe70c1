import json
from typing import Any, Dict

from fastapi import Request

from travelfunnel.errors import ValidationError


async def read_json_object(request: Request) -> Dict[str, Any]:
    """Request body as a JSON object; anything else is a 400."""
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except (ValueError, UnicodeDecodeError):
        raise ValidationError(message="Invalid JSON")
    if not isinstance(payload, dict):
        raise ValidationError(message="Invalid JSON")
    return payload
