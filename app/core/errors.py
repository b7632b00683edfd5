"""
Typed errors raised by the service layer.

Services never return None for "not found" or swallow a failed check; they
raise one of these and the API layer maps it to an HTTP status.
"""
from fastapi import Request
from fastapi.responses import JSONResponse


class HabitHubError(Exception):
    status_code = 400
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(HabitHubError):
    """Blank or out-of-range input (times_per_day < 1, bad HH:MM, ...)."""
    status_code = 422
    kind = "validation_error"


class NotFoundError(HabitHubError):
    status_code = 404
    kind = "not_found"


class ConflictError(HabitHubError):
    """Duplicate join, code space exhausted, or a concurrent write won."""
    status_code = 409
    kind = "conflict"


class AuthorizationError(HabitHubError):
    status_code = 403
    kind = "forbidden"


async def habithub_error_handler(request: Request, exc: HabitHubError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.detail},
    )
