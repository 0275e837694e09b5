"""
Account routes: registration, login, token refresh and account management.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, Request

from ..deps import get_account_service, require_admin, require_user
from ..errors import LoginFailed, NotFoundError
from ..models import Role
from ..schemas import AccountCreate, AccountId, AccountLogin, AccountOut, RefreshRequest, TokenPair
from ..service import AccountService
from ..utils.event_logger import log_auth_event

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Largest OFFSET a 64-bit SQL integer holds
MAX_OFFSET = 2**63 - 1


@router.put("/create", response_model=AccountOut)
def create_account(
    payload: AccountCreate,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    account = service.register(payload)
    log_auth_event("register", account.id, request)
    return account


@router.post("/login", response_model=TokenPair)
def login(
    credentials: AccountLogin,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    account = service.authenticate(credentials.login, credentials.password)
    if account is None:
        log_auth_event("login_failure", None, request)
        raise LoginFailed()
    log_auth_event("login_success", account.id, request)
    return service.issue_token_pair({"id": account.id})


@router.get("/account", response_model=AccountOut)
def get_account(
    token_payload: dict = Depends(require_user),
    service: AccountService = Depends(get_account_service),
):
    account = service.find_by_id(token_payload["id"])
    if account is None:
        raise NotFoundError()
    return account


@router.delete("/account", response_model=AccountOut)
def delete_account(
    payload: AccountId,
    request: Request,
    admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    account = service.delete_by_id(payload.id)
    log_auth_event("account_delete", account.id, request, {"by": admin["id"]})
    return account


@router.post("/set-admin", response_model=AccountOut)
def set_admin(
    payload: AccountId,
    request: Request,
    admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    account = service.set_role(payload.id, Role.ADMIN)
    log_auth_event("role_change", account.id, request, {"by": admin["id"], "role": Role.ADMIN.value})
    return account


@router.post("/set-user", response_model=AccountOut)
def set_user(
    payload: AccountId,
    request: Request,
    admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    account = service.set_role(payload.id, Role.USER)
    log_auth_event("role_change", account.id, request, {"by": admin["id"], "role": Role.USER.value})
    return account


@router.post("/refresh", response_model=TokenPair)
def refresh_tokens(
    payload: RefreshRequest,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    tokens = service.refresh(payload.token)
    log_auth_event("token_refresh", None, request)
    return tokens


@router.get("/several/{skip}/{take}", response_model=List[AccountOut])
def list_accounts(
    skip: int = Path(..., ge=0, le=MAX_OFFSET),
    take: int = Path(..., ge=1),
    _: dict = Depends(require_user),
    service: AccountService = Depends(get_account_service),
):
    take = min(take, service.settings.PAGE_MAX_TAKE)
    return service.list_page(skip, take)
