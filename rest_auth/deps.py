"""
Request dependencies: settings, account service and bearer-token guards.

``require_user`` and ``require_admin`` run before the route handler; raising
from them rejects the request without calling the handler.
"""
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .config import Settings
from .db import get_db
from .errors import AdminNotFound, Unauthorized
from .models import Role
from .service import AccountService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_account_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(db, settings)


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthorized()
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized()
    return token


def require_user(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    service: AccountService = Depends(get_account_service),
) -> dict:
    """
    Verify the access token and attach its payload to ``request.state``.

    Expired tokens raise TokenExpired; every other failure is Unauthorized.
    """
    payload = service.verify_token(bearer_token(authorization), service.settings.JWT_SECRET)
    request.state.token_payload = payload
    return payload


def require_admin(
    payload: dict = Depends(require_user),
    service: AccountService = Depends(get_account_service),
) -> dict:
    if not service.is_role(payload["id"], Role.ADMIN):
        raise AdminNotFound()
    return payload
