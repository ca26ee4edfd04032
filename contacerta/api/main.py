"""
HTTP Surface Entry Point
========================

Responsibilities:
- Initialize the FastAPI application for the reference backend
- Configure middleware stack
- Register API routers
- Set up exception handlers
- Provide health check endpoint
- Configure CORS

Usage:
    app = create_app()                                  # process-wide database
    app = create_app(session_factory=TestingSession)    # injected database
"""

import asyncio
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from contacerta.api.middleware import RequestContextMiddleware
from contacerta.api.routes import rest, rpc
from contacerta.core.config import get_settings
from contacerta.core.exceptions import BackendError, ContaCertaException
from contacerta.core.logging import configure_logging, get_logger
from contacerta.db.session import check_database_connection, create_schema, get_session_factory

# Initialize logger
logger = get_logger(__name__)


def create_app(
    session_factory: Optional[sessionmaker] = None,
    create_tables: bool = False,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        session_factory: Session factory to serve from, defaults to the
            process-wide one built from settings
        create_tables: Create missing tables on startup

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()
    configure_logging()

    # =====================================
    # Application Lifespan Handler
    # =====================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "application_starting",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
        )

        factory = app.state.session_factory or get_session_factory()
        engine = factory.kw.get("bind")
        if create_tables:
            create_schema(engine)
        if not check_database_connection(engine):
            logger.error("database_connection_failed")
        else:
            logger.info("database_connection_established")

        try:
            yield
        except asyncio.CancelledError:
            logger.debug("application_shutdown_requested")
            raise
        finally:
            logger.info("application_shutdown_complete")

    app = FastAPI(
        title=settings.app_name,
        description="""
        ContaCerta - Church Administration Reference Backend

        Relational storage with row-level security for the ContaCerta
        client core: every table read and write is scoped by organization
        membership.

        Authenticate with a bearer token issued by the auth provider.
        """,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.session_factory = session_factory

    # =====================================
    # Middleware
    # =====================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.add_middleware(RequestContextMiddleware)

    # =====================================
    # Exception Handlers
    # =====================================

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError):
        logger.info(
            "backend_error",
            code=exc.code,
            path=request.url.path,
            status_code=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(ContaCertaException)
    async def contacerta_exception_handler(request: Request, exc: ContaCertaException):
        logger.warning(
            "contacerta_exception",
            exception_type=type(exc).__name__,
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "code": type(exc).__name__,
                "message": exc.message,
                "details": exc.details,
                "hint": None,
            },
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning("request_validation_error", path=request.url.path, errors=errors)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "code": "VALIDATION_ERROR",
                "message": "Validation error",
                "details": {"errors": errors},
                "hint": None,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            exception_type=type(exc).__name__,
            message=str(exc),
            path=request.url.path,
            method=request.method,
            exc_info=True,
        )
        message = "An unexpected error occurred" if settings.environment == "production" else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": "INTERNAL_ERROR", "message": message, "details": {}, "hint": None},
        )

    # =====================================
    # Routers
    # =====================================

    app.include_router(rpc.router)
    app.include_router(rest.router)

    # =====================================
    # Health Check
    # =====================================

    @app.get(
        "/health",
        tags=["Health"],
        summary="Detailed Health Check",
        description="Returns health status including database connectivity.",
    )
    def detailed_health_check():
        factory = app.state.session_factory or get_session_factory()
        db_healthy = check_database_connection(factory.kw.get("bind"))
        return {
            "status": "healthy" if db_healthy else "degraded",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "checks": {
                "database": "healthy" if db_healthy else "unhealthy",
            },
        }

    return app


def app_factory() -> FastAPI:
    """uvicorn factory entry point; ``CONTACERTA_CREATE_TABLES=1`` creates missing tables."""
    return create_app(create_tables=os.environ.get("CONTACERTA_CREATE_TABLES") == "1")
