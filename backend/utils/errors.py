# backend/utils/errors.py


class AppError(Exception):
    """Base class for errors rendered into the JSON envelope by main.py."""
    status_code = 500

    def __init__(self, message="Internal server error", details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {
            "code": self.status_code,
            "status": "error",
            "message": self.message,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Malformed, missing or out-of-range field."""
    status_code = 400

    def __init__(self, message="Validation failed", details=None):
        super().__init__(message, details)


class ConflictError(AppError):
    """Duplicate unique key (product code, email, category name)."""
    status_code = 400


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, message="Not found", details=None):
        super().__init__(message, details)


class AuthError(AppError):
    status_code = 401

    def __init__(self, message="Please login to continue", details=None):
        super().__init__(message, details)


class InternalError(AppError):
    status_code = 500
