"""
Domain error types.

Services raise these; `main.py` turns them into JSON responses with the
message translated to the caller's language.
"""
from fastapi import status


class LegalOfficeError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message_key: str, headers: dict = None):
        super().__init__(message_key)
        self.message_key = message_key
        self.headers = headers


class NotFoundError(LegalOfficeError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class BadRequestError(LegalOfficeError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"


class UnauthorizedError(LegalOfficeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ForbiddenError(LegalOfficeError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class UpstreamServiceError(LegalOfficeError):
    """The hosted language model failed or answered with garbage."""
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "UPSTREAM_ERROR"
