"""
Waitlist error taxonomy.

Every error carries the HTTP status it renders as and the caller-facing
message. Internal details (driver errors, tracebacks) stay in the logs.
"""
from fastapi import status


class WaitlistError(Exception):
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"success": False, "message": self.message}


class InvalidEmailError(WaitlistError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Please provide a valid email address"


class DuplicateEmailError(WaitlistError):
    http_status = status.HTTP_409_CONFLICT
    default_message = "This email is already on our waitlist!"


class StoreError(WaitlistError):
    default_message = "Database operation failed"


class StoreUnavailableError(StoreError):
    default_message = "Database connection failed"
