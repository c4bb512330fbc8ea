"""
Customer Records Service
Customers and their postal addresses over HTTP/JSON, with structured logging and health probes.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional

from customer_records.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from customer_records.core_settings import Settings, get_settings
from customer_records.api.errors import register_error_handlers
from customer_records.api.routes import router as customers_router, address_router
from customer_records.infrastructure.db import Database

SERVICE_DESCRIPTION = "Customer and address record management service"

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    setup_logging(
        service_name=settings.SERVICE_NAME,
        level=settings.LOG_LEVEL,
        environment=settings.ENVIRONMENT,
        version=settings.SERVICE_VERSION,
        log_file=settings.LOG_FILE,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database for the lifetime of the process"""
        logger.info(f"Starting {settings.SERVICE_NAME} version {settings.SERVICE_VERSION}")

        database = Database(settings.database_url, echo=settings.SQL_ECHO)
        try:
            database.init_models()
            logger.info("Database models initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database models: {e}")
            database.dispose()
            raise
        app.state.database = database

        logger.info(f"{settings.SERVICE_NAME} started successfully")
        try:
            yield
        finally:
            logger.info(f"Shutting down {settings.SERVICE_NAME}")
            database.dispose()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        description=SERVICE_DESCRIPTION,
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    health_service = ServiceHealth(settings.SERVICE_NAME, settings.SERVICE_VERSION)
    app.include_router(health_service.create_health_router())

    app.include_router(customers_router)
    app.include_router(address_router)

    @app.get("/")
    async def root():
        return {
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "status": "running",
            "docs": "/api/docs"
        }

    @app.get("/info")
    async def info():
        """Service information endpoint"""
        return {
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "description": SERVICE_DESCRIPTION,
            "environment": settings.ENVIRONMENT,
            "endpoints": {
                "customers": "/api/customers",
                "addresses": "/api/addresses",
                "health": "/health",
                "ready": "/health/ready",
                "live": "/health/live",
                "metrics": "/metrics",
                "docs": "/api/docs"
            }
        }

    return app


app = create_app()
