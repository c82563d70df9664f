import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class PortalError(HTTPException):
    status_code = 500

    def __init__(self, message: str, headers: dict | None = None):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)
        self.message = message


class ValidationError(PortalError):
    status_code = 400


class AuthenticationError(PortalError):
    status_code = 401


class AuthorizationError(PortalError):
    status_code = 403


class ConflictError(PortalError):
    # La API original devuelve 400 para duplicados (email / equipo)
    status_code = 400


class NotFoundError(PortalError):
    status_code = 404


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    msg = first.get("msg") or "Invalid request"
    if first.get("type") == "missing":
        field = first.get("loc", ["", "field"])[-1]
        return f"{field} is required"
    return msg


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _first_error_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_MESSAGE})
