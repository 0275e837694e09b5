"""
Logging setup and auth event logging for the auth service.
"""
from typing import Optional
from fastapi import Request
import sys
import logging
import os

from ..config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_NAME = "app.log"

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "token_refresh",
    "role_change",
    "account_delete",
}


def configure_logging(settings: Settings) -> None:
    """
    Configure stdout and file logging.

    The file handler writes to ``LOG_DIR/app.log``; when the directory cannot
    be created the service keeps logging to stdout only.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    try:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(settings.LOG_DIR, LOG_FILE_NAME)))
    except (OSError, PermissionError) as e:
        print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For entry."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


def log_auth_event(
    event_type: str,
    account_id: Optional[str],
    request: Request,
    metadata: dict = None
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of: register, login_success, login_failure,
                    token_refresh, role_change, account_delete
        account_id: Id of the account involved, if known
        request: FastAPI Request object
        metadata: Optional dictionary of additional context

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    extra = " ".join(f"{k}={v}" for k, v in sorted((metadata or {}).items()))
    logger.info(
        "AUTH %s account_id=%s ip=%s user_agent=%s %s",
        event_type, account_id, client_ip(request), request.headers.get("user-agent"), extra
    )
