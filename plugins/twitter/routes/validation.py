# plugins/twitter/routes/validation.py
"""
Request validation helpers shared by the Twitter routes.

Every rejected input is answered with HTTP 400 and the validation message.
"""

import json
import logging

from fastapi import HTTPException, Request
from pydantic import ValidationError

from errors import CredentialError

logger = logging.getLogger(__name__)


def validate_data(model, data):
    """Validate data against a schema, raising HTTP 400 on failure."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


async def read_body(request: Request, model):
    """Parse the JSON request body and validate it against a schema."""
    try:
        data = await request.json()
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")
    return validate_data(model, data)


def credential_error(e: CredentialError) -> HTTPException:
    """Translate a categorized credential error into an HTTP 400 response."""
    logger.info(f"Request rejected ({e.code}): {e.message}")
    return HTTPException(status_code=400, detail=e.message)
