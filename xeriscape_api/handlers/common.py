"""
Shared request/response helpers for the API handlers
"""

import os
import traceback
from typing import Any, Type, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from xeriscape_api.config import EXPOSE_TRACEBACKS, ProviderSelection, select_provider, logger
from xeriscape_api.models.request_models import ErrorResponse
from xeriscape_api.utils.errors import ClientInputError, ProxyError, ServerConfigError

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON, raising ClientInputError on failure"""
    try:
        return await request.json()
    except ValueError as e:
        raise ClientInputError(f"Invalid request body - not valid JSON ({str(e)})")


def validate_body(model: Type[ModelT], body: Any) -> ModelT:
    """Validate a parsed JSON body, raising ClientInputError with a readable message"""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = ".".join(str(part) for part in err.get("loc", ())) or "body"
            problems.append(f"{field}: {err.get('msg')}")
        raise ClientInputError("Invalid request - " + "; ".join(problems))


def resolve_provider() -> ProviderSelection:
    """Pick the provider from the current environment; missing credentials are a config error"""
    selection = select_provider(os.environ)
    if selection is None:
        logger.error("No AI provider credential set (XAI_API_KEY or OPENAI_API_KEY)")
        raise ServerConfigError("Server configuration error: API key missing")
    return selection


def error_response(e: Exception, handler_name: str) -> JSONResponse:
    """
    Convert any exception into a JSON error response

    Args:
        e: The exception raised while handling the request
        handler_name: Used to tag the log line

    Returns:
        JSONResponse with an ErrorResponse body and the mapped status code
    """
    error_traceback = traceback.format_exc()
    if isinstance(e, ProxyError):
        status_code = e.status_code
        message = e.message
        if status_code >= 500:
            logger.error(f"[{handler_name}] {message}")
        else:
            logger.warning(f"[{handler_name}] {message}")
    else:
        status_code = 500
        message = f"Internal server error: {str(e) or 'unknown'}"
        logger.error(f"[{handler_name}] {message}\n{error_traceback}")

    content = ErrorResponse(
        error=message, traceback=error_traceback if EXPOSE_TRACEBACKS else None
    ).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=content)
