import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine

from storefront.config import SESSION_COOKIE_NAME, Settings, get_settings
from storefront.database import create_db_engine, init_db
from storefront.errors import StorefrontError
from storefront.logging_config import configure_logging
from storefront.route_filter import AdminRouteFilter
from storefront.routes import admin, auth, content, upload
from storefront.services.content_repository import CONTENT_KINDS
from storefront.services.image_storage import create_image_storage
from storefront.services.session_gate import SessionGate
from storefront.services.token_service import TokenService

logger = logging.getLogger(__name__)

_UNSET = object()
_static_dir = Path(__file__).resolve().parent.parent / "static"

_CONTENT_COLLECTIONS = frozenset(f"/api/{name}" for name in CONTENT_KINDS)


def validation_error_message(request: Request, exc: RequestValidationError) -> str:
    """Client-facing message for a request FastAPI could not parse."""
    if request.method == "POST" and request.url.path.rstrip("/") in _CONTENT_COLLECTIONS:
        return "Missing required fields"
    if any((error.get("loc") or ("",))[0] == "body" for error in exc.errors()):
        return "Invalid request body"
    return "Invalid request parameters"


def resolve_static_file(static_dir: Path, full_path: str) -> Optional[Path]:
    """File under ``static_dir`` for a URL path, or None if missing or outside it."""
    root = static_dir.resolve()
    file_path = (root / full_path).resolve()
    if not file_path.is_relative_to(root) or not file_path.is_file():
        return None
    return file_path


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(f"Rejected {request.method} {request.url.path}: {len(exc.errors())} validation error(s)")
        return JSONResponse(status_code=400, content={"error": validation_error_message(request, exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    image_storage=_UNSET,
    engine: Optional[Engine] = None,
    static_dir: Optional[Path] = None,
) -> FastAPI:
    """
    Build the API with its services wired in.

    ``settings`` defaults to the environment. ``engine`` defaults to one
    built from ``settings.database_url``; ``image_storage`` defaults to the
    S3 store from settings (None when unconfigured, which disables uploads).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if engine is None:
        engine = create_db_engine(settings.database_url, echo=settings.sql_echo)
    token_service = TokenService(settings.jwt_secret, settings.token_expiry_seconds)
    session_gate = SessionGate(token_service, SESSION_COOKIE_NAME)
    if image_storage is _UNSET:
        image_storage = create_image_storage(settings.storage)
    static_dir = static_dir or _static_dir

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.engine = engine
    app.state.token_service = token_service
    app.state.session_gate = session_gate
    app.state.image_storage = image_storage

    app.add_middleware(
        AdminRouteFilter,
        gate=session_gate,
        protected_prefixes=settings.protected_prefixes,
        public_paths=settings.public_paths,
        login_path=settings.login_path,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(content.routers["products"], prefix="/api", tags=["products"])
    app.include_router(content.routers["services"], prefix="/api", tags=["services"])
    app.include_router(upload.router, prefix="/api")
    app.include_router(admin.router)

    @app.on_event("startup")
    def on_startup():
        init_db(app.state.engine)
        logger.info(f"{settings.app_name} started ({settings.environment})")

    @app.get("/api/health")
    def health_check():
        return {"app_name": settings.app_name, "status": "healthy"}

    # Serve the public site build in production.
    # The build script places the frontend output in backend/static/
    if static_dir.is_dir():
        if (static_dir / "assets").is_dir():
            app.mount("/assets", StaticFiles(directory=str(static_dir / "assets")), name="static-assets")

        @app.get("/{full_path:path}", include_in_schema=False)
        async def serve_spa(full_path: str):
            """Serve the SPA index.html for all non-API routes."""
            file_path = resolve_static_file(static_dir, full_path)
            if file_path is not None:
                return FileResponse(str(file_path))
            return FileResponse(str(static_dir / "index.html"))
    else:
        @app.get("/")
        def root():
            return {"message": f"{settings.app_name} (no frontend build found)"}

    return app


app = create_app()
