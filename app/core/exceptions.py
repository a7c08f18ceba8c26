"""Application-level exceptions and FastAPI exception handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        field: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.field = field
        super().__init__(message)

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: str | None = None):
        msg = f"{entity} not found" if not entity_id else f"{entity} '{entity_id}' not found"
        super().__init__(msg, status_code=404, code="NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id

class ConflictError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=409, code="CONFLICT")

class UnauthorizedError(AppException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401, code="UNAUTHORIZED")

class ValidationError(AppException):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, status_code=422, code="VALIDATION_ERROR", field=field)

# ---------------------------------------------------------------------------
# Workflow errors (raised by app.workflow.engine and app.services.review)
# ---------------------------------------------------------------------------

class InvalidTransitionError(AppException):
    """The requested action is not allowed from the record's current status."""

    def __init__(self, action: str, current_status: str | None):
        super().__init__(
            f"Action '{action}' is not allowed from status '{current_status}'",
            status_code=409,
            code="INVALID_TRANSITION",
        )
        self.action = action
        self.current_status = current_status

class PermissionDeniedError(AppException):
    def __init__(self, message: str = "Permission denied", capability: str | None = None):
        super().__init__(message, status_code=403, code="PERMISSION_DENIED")
        self.capability = capability

class MissingRequiredFieldError(AppException):
    def __init__(self, field: str):
        super().__init__(
            f"'{field}' is required for this action",
            status_code=422,
            code="MISSING_REQUIRED_FIELD",
            field=field,
        )

class PersistenceError(AppException):
    """Raised when the storage collaborator fails; the original error is kept as ``cause``."""

    def __init__(self, cause: Exception):
        super().__init__(
            "Failed to persist changes",
            status_code=503,
            code="PERSISTENCE_FAILURE",
        )
        self.cause = cause

# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error_body(code: str, message: str, field: str | None = None) -> dict:
    error = {"code": code, "message": message}
    if field:
        error["field"] = field
    return {"error": error}

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if isinstance(exc, PersistenceError):
            logger.error("Persistence failure on %s %s: %r", request.method, request.url.path, exc.cause)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.field),
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=_error_body("NOT_FOUND", "Resource not found"),
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )
