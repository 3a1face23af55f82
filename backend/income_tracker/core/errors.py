# income_tracker/core/errors.py
"""Domain error taxonomy.

Endpoints raise these instead of building responses by hand; the handlers
registered in main.py turn them into ``{"error": ..., "details": ...}``.
"""
from typing import Any, List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class ConflictError(AppError):
    # uniqueness violations are reported as bad requests, one message per field
    status_code = 400
    default_message = "Resource already exists"


class AuthError(AppError):
    status_code = 401
    default_message = "Could not validate credentials"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Not enough permissions"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    status_code = 500
