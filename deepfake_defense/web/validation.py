"""
Request body parsing with user-facing error messages.

Bodies are read as raw JSON and validated against a pydantic model. A
failure becomes an ``HTTPException(400)`` whose detail is a single readable
sentence rather than pydantic's error list.
"""

import json
from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import HTTPException, Request
from pydantic import BaseModel, ValidationError

M = TypeVar('M', bound=BaseModel)

INVALID_JSON = "Invalid JSON format"


async def read_json(request: Request) -> Any:
    """Decode the request body, or fail with 400 "Invalid JSON format"."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=INVALID_JSON)


def error_message(
    error: ValidationError,
    data: Any,
    required: tuple,
    missing_message: str,
    field_messages: Optional[Dict[str, str]] = None,
) -> str:
    """Pick the message for the first problem in ``error``.

    Missing (absent, null or empty) required fields take priority, then the
    per-field messages, then the validator's own text.
    """
    if not isinstance(data, dict):
        return missing_message
    for name in required:
        if data.get(name) in (None, ''):
            return missing_message

    field_messages = field_messages or {}
    for detail in error.errors():
        field = str(detail['loc'][0]) if detail['loc'] else ''
        if field in field_messages:
            return field_messages[field]
        if detail['type'] == 'value_error':
            return str(detail['ctx']['error'])
        return f"Invalid value for {field}: {detail['msg']}" if field else detail['msg']
    return missing_message


def parse_body(
    model: Type[M],
    data: Any,
    required: tuple,
    missing_message: str,
    field_messages: Optional[Dict[str, str]] = None,
) -> M:
    """Validate ``data`` as ``model`` or raise a 400 with a readable message."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=error_message(e, data, required, missing_message, field_messages),
        )
