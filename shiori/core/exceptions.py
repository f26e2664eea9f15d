import logging
from typing import List, Optional

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.requests import Request

logger = logging.getLogger(__name__)

# ---------------------------
# Service (Business logic)
# ---------------------------

class BusinessError(Exception):
    """Base class for all business logic errors."""
    pass

class ServiceError(BusinessError):
    """Generic error for unexpected service failures."""
    pass

class NotFoundError(BusinessError):
    """Raised when a requested resource does not exist."""
    pass

class UserNotFoundError(NotFoundError):
    """Raised when no user has the given email."""

    def __init__(self, detail: str = "User with this email does not exist"):
        super().__init__(detail)

class ConflictError(BusinessError):
    """Raised when a resource already exists or conflicts with another resource."""
    pass

class DuplicateEmailError(ConflictError):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(detail)

class DuplicateUsernameError(ConflictError):
    def __init__(self, detail: str = "Username already taken"):
        super().__init__(detail)

class ValidationError(BusinessError):
    """Raised when business rule validation fails (e.g., invalid input)."""

    def __init__(self, detail: str = "Validation failed", errors: Optional[List[str]] = None):
        super().__init__(detail)
        self.errors = errors or [detail]

class EmptyTextError(ValidationError):
    def __init__(self, detail: str = "Entry text cannot be empty"):
        super().__init__(detail)

class TextTooLongError(ValidationError):
    def __init__(self, max_length: int):
        super().__init__(f"Entry text is too long (maximum {max_length} characters)")
        self.max_length = max_length

class UnauthorizedError(BusinessError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED

class InvalidCredentialError(UnauthorizedError):
    def __init__(self, detail: str = "Incorrect password"):
        super().__init__(detail)

class TokenExpiredError(UnauthorizedError):
    def __init__(self, detail: str = "Token has expired, please log in again"):
        super().__init__(detail)

class TokenInvalidError(UnauthorizedError):
    """Signature or structure check failed."""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str = "Token is malformed or invalid"):
        super().__init__(detail)

class UserGoneError(UnauthorizedError):
    """Token is valid but its user no longer exists."""

    def __init__(self, detail: str = "User no longer exists"):
        super().__init__(detail)


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def register_exception_handlers(app):
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc)},
        )

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            message = error.get("msg", "Invalid value")
            errors.append(f"{location}: {message}" if location else message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request data", "errors": errors},
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        logger.error(f"Service error: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
