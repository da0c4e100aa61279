from fastapi import HTTPException, Request
from typing import Any, Dict
import json

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

async def read_form_fields(request: Request) -> Dict[str, Any]:
    """
    Read a form post as a flat dict.

    Accepts JSON bodies as well as url-encoded / multipart forms, since the
    site posts plain HTML forms and the demo pages post JSON.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(status_code=400, detail="Request body is not valid JSON")
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        return data

    if not content_type.startswith(FORM_CONTENT_TYPES):
        raise HTTPException(status_code=400, detail="Request body must be a form or a JSON object")

    form = await request.form()
    return {key: value for key, value in form.items()}
