import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware

from aula.app.api.v1.router import api_router
from aula.app.core.config import Settings, get_settings
from aula.app.core.exceptions import AuthenticationError, AulaError, StoreError
from aula.app.core.logging import setup_logging
from aula.app.db import init_models
from aula.app.db.session import create_engine_from_settings, create_session_factory
from aula.app.security.google import GoogleIdentityVerifier
from aula.app.security.jwt import TokenService
from aula.app.services.credentials import ensure_user

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def aula_error_handler(request: Request, exc: AulaError):
    return _error_response(exc.status_code, exc.message)


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error_response(StoreError.status_code, StoreError.message)


def _guarded(request: Request) -> bool:
    prefix = request.app.state.settings.API_STR + "/students"
    path = request.url.path
    return path == prefix or path.startswith(prefix + "/")


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # FastAPI validates the body before running route dependencies, so the
    # roster auth guard has to be repeated here: a bad token wins over a bad body
    if _guarded(request):
        scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
        if scheme.lower() != "bearer" or not token:
            return _error_response(401, "missing authorization")
        try:
            request.app.state.token_service.verify(token)
        except AuthenticationError:
            return _error_response(401, "invalid token")
    return _error_response(400, "invalid request body")


def create_app(
        settings: Optional[Settings] = None,
        identity_verifier: Optional[GoogleIdentityVerifier] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    engine = create_engine_from_settings(settings)
    session_factory = create_session_factory(engine)

    # --- LIFESPAN: create tables and the optional admin account ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_models(engine)
        if settings.DEFAULT_ADMIN_PASSWORD:
            async with session_factory() as db:
                created = await ensure_user(
                    db,
                    settings.DEFAULT_ADMIN_USERNAME,
                    settings.DEFAULT_ADMIN_PASSWORD,
                    rounds=settings.BCRYPT_ROUNDS,
                )
            if created:
                logger.info("Created default account %s", settings.DEFAULT_ADMIN_USERNAME)
        yield
        await engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        openapi_url=f"{settings.API_STR}/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.token_service = TokenService(
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        lifetime=settings.access_token_lifetime,
    )
    app.state.identity_verifier = identity_verifier or GoogleIdentityVerifier(settings.GOOGLE_CLIENT_ID)

    if not settings.GOOGLE_CLIENT_ID and identity_verifier is None:
        logger.warning("GOOGLE_CLIENT_ID is not set; Google sign-in is disabled")

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(AulaError, aula_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(api_router, prefix=settings.API_STR)

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    return app
