"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (token secret, database,
Redis). Middleware, CORS, and routers all registered here.

Startup is where configuration errors become fatal: if MEMO_JWT_SECRET
is missing or MEMO_JWT_EXP_SECS is garbage, TokenService.from_environment()
raises inside the lifespan and the server never starts serving.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from memoapp import __version__
from memoapp.api import api_router
from memoapp.auth.password import PasswordHasher
from memoapp.auth.token import TokenService
from memoapp.config import Settings, settings as default_settings
from memoapp.repository.base import AccountStore, NoteStore, StoreError
from memoapp.repository.memory import InMemoryAccountStore, InMemoryNoteStore

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. An exception before `yield` aborts startup.
    """
    settings: Settings = app.state.settings

    if getattr(app.state, "token_service", None) is None:
        app.state.token_service = TokenService.from_environment()

    logger.info(
        "memoapp.starting",
        version=__version__,
        environment=settings.environment,
        store_backend=settings.store_backend,
        token_ttl_seconds=app.state.token_service.ttl_seconds,
        port=settings.port,
    )

    from memoapp.db.engine import create_tables, engine

    if settings.store_backend == "sql" and settings.database_url.startswith("sqlite"):
        await create_tables(engine)

    from memoapp.cache import close_redis, init_redis

    if settings.redis_url:
        try:
            await init_redis(settings.redis_url)
            logger.info("memoapp.redis_connected")
        except Exception as e:
            # Redis is optional — only rate limiting depends on it
            logger.warning("memoapp.redis_unavailable", error=str(e))

    yield

    logger.info("memoapp.shutdown")
    await close_redis()
    await engine.dispose()


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("store.error", error=str(exc), cause=repr(exc.__cause__))
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


def create_app(
    settings: Optional[Settings] = None,
    token_service: Optional[TokenService] = None,
    password_hasher: Optional[PasswordHasher] = None,
    account_store: Optional[AccountStore] = None,
    note_store: Optional[NoteStore] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Everything the auth core needs can be injected; whatever is left
    out is built from settings (and the token service from the
    environment, at startup).
    """
    settings = settings or default_settings

    app = FastAPI(
        title="memoapp",
        description="Notes service with email/password accounts and JWT auth",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.token_service = token_service
    app.state.password_hasher = password_hasher or PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )

    if settings.store_backend == "memory":
        account_store = account_store or InMemoryAccountStore()
        note_store = note_store or InMemoryNoteStore()
    app.state.account_store = account_store
    app.state.note_store = note_store

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from memoapp.middleware.rate_limit import RateLimitMiddleware
    from memoapp.middleware.request_id import RequestIdMiddleware
    from memoapp.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreError, _store_error_handler)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: memoapp.main:app)
app = create_app()
