"""
Catalog Service - FastAPI application factory.

Wires settings, JSON record stores, repositories, the auth gate and routers
into one app. Users and products live in flat JSON files under DATA_DIR.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth_gate import AuthGate
from .config import Settings, get_settings
from .exceptions import CatalogServiceException, UnauthorizedException
from .logging_config import get_logger, setup_logging
from .metrics import metrics_endpoint, track_request_metrics
from .metrics_middleware import PrometheusMiddleware
from .models import HealthResponse
from .repositories import JsonRecordStore, ProductRepository, UserRepository
from .routers.v1 import auth, products, users
from .services import AuthService

SERVICE_NAME = "catalog-service"
VERSION = "1.0.0"

logger = get_logger(__name__)

_HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def _error_response(
    status_code: int, code: str, message: str, headers: Optional[dict] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code, "message": message},
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Creates the data directory and seeds the bootstrap admin when configured.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting Catalog Service",
        version=VERSION,
        data_dir=str(settings.DATA_DIR),
        debug=settings.DEBUG,
    )
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)

    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        await app.state.auth_service.ensure_admin(
            settings.ADMIN_NAME, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD
        )

    yield

    logger.info("Shutting down Catalog Service")


def register_exception_handlers(app: FastAPI) -> None:
    """Map the service's error taxonomy onto JSON error responses."""

    @app.exception_handler(CatalogServiceException)
    async def catalog_exception_handler(request: Request, exc: CatalogServiceException):
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                path=request.url.path,
                method=request.method,
                error=exc.message,
                details=exc.details,
                exc_info=exc,
            )
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "internal_server_error",
                "An unexpected error occurred",
            )

        headers = None
        if isinstance(exc, UnauthorizedException):
            headers = {"WWW-Authenticate": "Bearer"}
        return _error_response(exc.status_code, exc.code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = sorted(
            {".".join(str(part) for part in error["loc"][1:]) or "body" for error in exc.errors()}
        )
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "validation_error",
            f"Missing or invalid fields: {', '.join(fields)}",
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(
            exc.status_code,
            _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            str(exc.detail),
            getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_server_error",
            "An unexpected error occurred",
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit configuration; read from the environment when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(log_level=settings.LOG_LEVEL, service_name=SERVICE_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="User and product catalog backed by JSON files, with JWT auth",
        version=VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    user_repository = UserRepository(JsonRecordStore(settings.users_file, "users"))
    product_repository = ProductRepository(
        JsonRecordStore(settings.products_file, "products")
    )
    auth_gate = AuthGate(settings, user_repository)

    app.state.settings = settings
    app.state.user_repository = user_repository
    app.state.product_repository = product_repository
    app.state.auth_gate = auth_gate
    app.state.auth_service = AuthService(settings, user_repository, auth_gate)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return await metrics_endpoint()

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            collections=["users", "products"],
        )

    return app
