"""
Application entry point. FastAPI app with middleware and routers.
Run: python main.py  (or uvicorn main:app --host 0.0.0.0 --port 3000)
"""

import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import ping_router, root_router, users_router
from core.config import Settings, get_settings
from core.error_handlers import register_error_handlers
from core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware, SecureHeadersMiddleware
from services.user_store import UserStore, create_default_store
from utils.logging import get_logger

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization", "X-Requested-With", "Accept", REQUEST_ID_HEADER]
CORS_EXPOSE_HEADERS = [REQUEST_ID_HEADER, "X-RateLimit-Limit", "X-RateLimit-Remaining"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: log effective config.
    Shutdown: runs after uvicorn stops accepting connections (SIGTERM/SIGINT).
    """
    settings = get_settings()
    logger.info(
        "startup",
        extra={
            "app": settings.APP_NAME,
            "env": settings.NODE_ENV,
            "log_level": settings.LOG_LEVEL,
        },
    )
    yield
    logger.info("shutdown", extra={"app": settings.APP_NAME})


def create_app(store: UserStore | None = None) -> FastAPI:
    """Factory for FastAPI app. Each call gets its own store unless one is passed in."""
    settings = get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        description="HTTP API starter with structured errors and request correlation",
        version="1.0.0",
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.user_store = store if store is not None else create_default_store()

    # Registration order: first added is innermost
    register_error_handlers(app)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecureHeadersMiddleware, hsts=settings.is_production)
    _add_cors(app, settings)

    app.include_router(root_router)
    app.include_router(ping_router)
    app.include_router(users_router)

    return app


def _add_cors(app: FastAPI, settings: Settings) -> None:
    """Development: any origin. Otherwise only CORS_ORIGINS; none when unset."""
    if settings.is_development:
        origins = {"allow_origin_regex": ".*"}
    else:
        origins = {"allow_origins": settings.cors_origins_list}
    app.add_middleware(
        CORSMiddleware,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=CORS_EXPOSE_HEADERS,
        allow_credentials=False,
        max_age=86400,
        **origins,
    )


app = create_app()


def run() -> None:
    """Serve with uvicorn; exit 1 if the listener cannot start."""
    s = get_settings()
    config = uvicorn.Config(
        app,
        host=s.HOST,
        port=s.PORT,
        log_level=logger.getEffectiveLevel(),
        timeout_graceful_shutdown=s.close_grace_delay_seconds,
    )
    server = uvicorn.Server(config)
    try:
        server.run()
    except Exception:
        logger.exception("server_error", extra={"port": s.PORT})
        sys.exit(1)
    if not server.started:
        logger.error("listen_failed", extra={"host": s.HOST, "port": s.PORT})
        sys.exit(1)


if __name__ == "__main__":
    run()
