"""
Custom exceptions for the auth module.
"""

class AuthException(Exception):
    """Base exception for auth-related errors."""
    pass


class DatabaseException(AuthException):
    """Raised when database operations fail."""
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Database operation failed: {operation}")


class ClerkAPIError(AuthException):
    """Raised when a call to the Clerk Backend API fails."""
    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class SessionVerificationError(AuthException):
    """Raised when a Clerk session token cannot be verified."""
    pass
