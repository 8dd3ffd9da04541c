import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from studio.config import Settings, get_settings
from studio.core.errors import StorageError
from studio.core.limiter import limiter
from studio.modules.chat import routes as chat_routes
from studio.modules.chat.service import CompletionProvider
from studio.modules.configs import routes as configs_routes
from studio.modules.deployments import routes as deployments_routes
from studio.modules.files import routes as files_routes
from studio.modules.projects import routes as projects_routes
from studio.modules.users import routes as users_routes
from studio.storage import Storage, open_storage

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    provider: Optional[CompletionProvider] = None,
) -> FastAPI:
    """
    Build the API. Storage and provider handles live on app.state; when not
    injected, storage is opened at startup and the provider on first use.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.provider = provider
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"detail": jsonable_errors(exc)})

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure in {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Storage backend error"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        if settings.is_production:
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include module routes
    app.include_router(users_routes.router, prefix="/api")
    app.include_router(projects_routes.router, prefix="/api")
    app.include_router(files_routes.router, prefix="/api")
    app.include_router(deployments_routes.router, prefix="/api")
    app.include_router(configs_routes.router, prefix="/api")
    app.include_router(chat_routes.router, prefix="/api")

    @app.on_event("startup")
    async def startup_event():
        logger.info("Application startup")
        if app.state.storage is None:
            app.state.storage = await open_storage(settings)
        logger.info(f"Storage backend: {type(app.state.storage).__name__}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Application shutdown")
        if app.state.storage is not None:
            await app.state.storage.close()

    @app.get("/api/health")
    @limiter.exempt
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Pydantic error dicts minus the raw exception objects they sometimes carry."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


settings = get_settings()
configure_logging(settings)
app = create_app(settings)
