"""
Domain errors raised by the account service and auth dependencies.

Each error carries the HTTP status and message the API answers with; the
handlers registered in ``main.create_app`` turn them into JSON responses.
"""
from typing import Optional

from fastapi import status

from .constants import (
    ERR_FIND_ADMIN,
    ERR_FIND_USER,
    ERR_JWT_EXPIRED,
    ERR_PASS_DONT_MATCH,
    ERR_UNAUTHORIZED,
    ERR_USER_CREATION,
)


class AuthServiceError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PasswordMismatch(AuthServiceError):
    default_message = ERR_PASS_DONT_MATCH


class CreationError(AuthServiceError):
    default_message = ERR_USER_CREATION


class NotFoundError(AuthServiceError):
    default_message = ERR_FIND_USER


class LoginFailed(AuthServiceError):
    default_message = ERR_UNAUTHORIZED


class Unauthorized(AuthServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = ERR_UNAUTHORIZED


class InvalidToken(Unauthorized):
    pass


class TokenExpired(Unauthorized):
    default_message = ERR_JWT_EXPIRED


class AdminNotFound(Unauthorized):
    default_message = ERR_FIND_ADMIN
