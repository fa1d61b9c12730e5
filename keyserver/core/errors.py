from typing import Optional
from fastapi import status


class KeyServerError(Exception):
    """
    Base class for errors surfaced to API callers.
    Each subclass maps to an HTTP status and a default user-facing message.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An unexpected internal server error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(KeyServerError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request."


class AuthError(KeyServerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired session"


class NotFoundError(KeyServerError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Key not found"


class StoreError(KeyServerError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Data store error"
