# exercise_tracker/api/payload.py

import json
from typing import Any, Dict

from fastapi import Request

from exercise_tracker.errors import ValidationError


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Request body as a flat dict, from either a JSON object or form data.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            body = json.loads(raw)
        except ValueError:
            raise ValidationError("Invalid JSON body")
        if not isinstance(body, dict):
            raise ValidationError("JSON body must be an object")
        return body

    if content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        return {key: value for key, value in form.items()}

    return {}
