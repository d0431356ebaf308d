"""Turn pydantic validation errors into the per-field shape the site reports.

The API and the client both validate with the same pydantic models; this
module gives them the same human-readable messages and the same
``{"path": ..., "message": ...}`` entries.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

VALIDATION_FAILED = "Validation failed"

# (field, pydantic error type) -> message shown to the guest
FIELD_MESSAGES: dict[tuple[str, str], str] = {
    ("name", "missing"): "Name is required",
    ("name", "string_too_short"): "Name is required",
    ("name", "string_too_long"): "Name is too long",
    ("message", "missing"): "Message is required",
    ("message", "string_too_short"): "Message is required",
    ("message", "string_too_long"): "Message is too long",
    ("email", "missing"): "Email is required",
    ("email", "value_error"): "Invalid email address",
    ("attending", "missing"): "Please select if you will attend",
    ("attending", "bool_parsing"): "Please select if you will attend",
    ("attending", "bool_type"): "Please select if you will attend",
    ("guests", "greater_than_equal"): "At least 1 guest is required",
    ("guests", "less_than_equal"): "Maximum 10 guests allowed",
    ("dietary_restrictions", "string_too_long"): "Dietary restrictions too long",
}


def error_details(exc: ValidationError | RequestValidationError) -> list[dict[str, str]]:
    """One ``{"path", "message"}`` entry per failing field, in pydantic's order.

    FastAPI prefixes request body errors with ``"body"``; paths are relative
    to the body so both sources report the same fields.
    """
    details: list[dict[str, str]] = []
    seen: set[str] = set()
    for error in exc.errors():
        loc = tuple(error["loc"])
        if loc[:1] == ("body",):
            loc = loc[1:]
        path = ".".join(str(part) for part in loc)
        if path in seen:
            continue
        seen.add(path)
        field = str(loc[0]) if loc else ""
        details.append(
            {
                "path": path,
                "message": FIELD_MESSAGES.get((field, error["type"]), error["msg"]),
            }
        )
    return details


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Map of field name to its first error message, for rendering next to form inputs."""
    return {detail["path"]: detail["message"] for detail in error_details(exc)}


def validation_error_response(exc: ValidationError | RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": VALIDATION_FAILED, "details": error_details(exc)},
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report invalid request bodies as a 400 with per-field details instead of FastAPI's 422."""
    return validation_error_response(exc)
