# backend/app/auth/errors.py
from typing import Optional

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_OR_EXPIRED_OTP = "Invalid or expired OTP"


class GatewayError(Exception):
    """Base for every error the auth gateway turns into an HTTP response."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(GatewayError):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, timestamp: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.timestamp = timestamp


class AuthenticationError(GatewayError):
    status_code = 401

    def __init__(self, message: str = INVALID_CREDENTIALS, timestamp: Optional[str] = None):
        super().__init__(message)
        self.timestamp = timestamp


class ConflictError(GatewayError):
    status_code = 400


class ResetError(GatewayError):
    status_code = 400

    def __init__(self, message: str = INVALID_OR_EXPIRED_OTP):
        super().__init__(message)


class NotFoundError(GatewayError):
    status_code = 404


class DependencyError(GatewayError):
    """Persistence or mail failure; the detail is only shown in development."""

    status_code = 500
