"""
REST auth service - account registration, login and JWT issuance

Run with ``python -m rest_auth`` or ``uvicorn rest_auth.main:create_app --factory``.
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .constants import BANNER, ERR_INTERNAL, ERR_NOT_FOUND
from .db import build_engine, build_session_factory, init_db
from .errors import AuthServiceError
from .routes import accounts, health
from .utils.event_logger import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release the pool on shutdown"""
    init_db(app.state.engine)
    yield
    app.state.engine.dispose()


async def auth_error_handler(request: Request, exc: AuthServiceError):
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    logger.info("%s %s -> 400 validation failed: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": errors})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse(status_code=exc.status_code, content={"message": ERR_NOT_FOUND})
    return await http_exception_handler(request, exc)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse(ERR_INTERNAL, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The settings object is stored on ``app.state`` and reaches the service
    and auth dependencies through ``deps.get_settings``.
    """
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="REST Auth",
        description="Account registration, login and JWT issuance",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthServiceError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(accounts.router)
    app.include_router(health.router)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return BANNER

    return app
