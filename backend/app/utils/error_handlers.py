"""
Centralized error handling and user-friendly error messages.

Services raise `AppError` subclasses; the FastAPI app turns them into the
standard `{"success": false, "error": ...}` payload (see `create_error_response`).
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""
    def __init__(self, message: str, status_code: int = 500, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Validation error."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Resource not found", details: dict | None = None):
        super().__init__(message, status_code=404, details=details)


class UnauthorizedError(AppError):
    """Unauthorized access error."""
    def __init__(self, message: str = "Unauthorized access", details: dict | None = None):
        super().__init__(message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Forbidden access error."""
    def __init__(self, message: str = "Access forbidden", details: dict | None = None):
        super().__init__(message, status_code=403, details=details)


class ConflictError(AppError):
    """Uniqueness violation or already-satisfied precondition."""
    def __init__(self, message: str = "This record already exists", details: dict | None = None):
        super().__init__(message, status_code=409, details=details)


class DatabaseError(AppError):
    """Database error."""
    def __init__(self, message: str = "Database operation failed", details: dict | None = None):
        super().__init__(message, status_code=500, details=details)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "invalid_credentials": "Invalid email or password. Please try again.",
    "email_exists": "An account with this email already exists. Please login instead.",
    "invalid_token": "Invalid or expired session token. Please login again.",
    "missing_token": "Please login to access this feature.",
    "user_not_found": "User not found.",

    # Organizations
    "organization_not_found": "Organization not found.",
    "slug_exists": "Organization slug already exists.",
    "already_in_organization": "User is already part of this organization.",
    "belongs_to_other_organization": "User belongs to another organization.",
    "not_organization_member": "User does not belong to this organization.",
    "organization_has_jobs": "Organization still has jobs. Delete or move them first.",
    "organization_link_failed": "Organization could not be linked to your account. Nothing was saved.",
    "admin_not_member": "Platform admins cannot be added to an organization.",

    # Jobs
    "job_not_found": "Job posting not found or has been removed.",
    "job_closed": "Job is not open for applications.",
    "no_organization": "Recruiter must belong to an organization.",
    "already_applied": "You have already applied for this job.",

    # Applications
    "application_not_found": "Application not found. It may have been withdrawn.",

    # General
    "unauthorized": "Please login to access this feature.",
    "forbidden": "You don't have permission to access this resource.",
    "not_found": "The requested resource was not found.",
    "server_error": "Something went wrong on our end. Please try again later.",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def handle_database_error(error: Exception, operation: str = "") -> AppError:
    """Map a raw database error to an `AppError` without leaking store details."""
    logger.error(f"Database error during {operation}: {error}")

    error_str = str(error).lower()

    if "duplicate" in error_str or "unique" in error_str:
        return ConflictError("This record already exists. Please check your input.")

    if "foreign key" in error_str:
        return ValidationError("Invalid reference. The related record may have been deleted.")

    return DatabaseError(get_error_message("database_error"))


def create_error_response(
    status_code: int,
    message: str,
    details: dict | None = None
) -> JSONResponse:
    """Create a standardized error response."""
    content = {
        "success": False,
        "error": message,
        "status_code": status_code,
    }

    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to the standard error payload; store internals are only logged."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return create_error_response(exc.status_code, exc.message, exc.details)

    # Starlette's base class also covers unknown routes and 405s, not just FastAPI raises.
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTPException with user-friendly messages."""
        return create_error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = get_error_message("validation_error")
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        logger.warning("Request validation failed on %s %s: %s", request.method, request.url.path, message)
        return create_error_response(400, message)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("IntegrityError on %s %s: %s", request.method, request.url.path, exc.orig)
        return create_error_response(409, "This record already exists. Please check your input.")

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        """Handle general database errors."""
        logger.exception("Database SQLAlchemyError: %s", exc)
        return create_error_response(500, get_error_message("database_error"))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors globally."""
        logger.exception("Unhandled exception: %s", exc)
        return create_error_response(500, get_error_message("server_error"))
