"""
ASGI application for the real-estate catalogue.

Run with ``uvicorn realty.main:app`` or ``python -m realty.main``.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from realty.config import settings
from realty.database import check_database_connection, close_db_connection
from realty.events import PropertyEvent, property_events
from realty.routers import auth_router, properties_router, favorites_router, admins_router
from realty.utils.exceptions import APIException
from realty.services.error_handler import ErrorHandlerService

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)

API_DESCRIPTION = """
Real-estate catalogue API.

* **Catalogue**: filter properties by type, location, price range and status
* **Favorites**: anonymous bookmarks keyed by the `x-session-id` header
* **Back office**: property management with image upload, admin accounts

Mutations need `Authorization: Bearer <token>`; obtain one from `/api/admin/login`.
"""

OPENAPI_TAGS = [
    {"name": "Properties", "description": "Catalogue queries and property management"},
    {"name": "Favorites", "description": "Session-scoped favorites"},
    {"name": "Authentication", "description": "Admin login"},
    {"name": "Admins", "description": "Admin account management (super admin only)"},
    {"name": "Health", "description": "Liveness and database checks"},
]

EXCEPTION_HANDLERS = (
    (APIException, ErrorHandlerService.handle_api_exception),
    (RequestValidationError, ErrorHandlerService.handle_validation_error),
    (SQLAlchemyError, ErrorHandlerService.handle_database_error),
    (StarletteHTTPException, ErrorHandlerService.handle_http_exception),
    (Exception, ErrorHandlerService.handle_unexpected_error),
)


def log_property_event(event: PropertyEvent) -> None:
    logger.info(f"Property {event.property_id} {event.kind.value}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    if not await check_database_connection():
        logger.error("Database is unreachable at startup")
    property_events.subscribe(log_property_event)

    yield

    logger.info("Shutting down")
    property_events.unsubscribe(log_property_event)
    await close_db_connection()


def _register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS:
        async def endpoint(request, exc, handler=handler):
            return handler(exc, request)
        app.add_exception_handler(exception_class, endpoint)


async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc", "openapi_json": "/openapi.json"},
        "api_prefix": settings.api_prefix,
    }


async def health_check():
    """Reports 503 when the database does not answer."""
    if not await check_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected",
    }


def create_app() -> FastAPI:
    """Build the application: routers under the API prefix, the uploads mount and health routes."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=API_DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    for router in (properties_router, favorites_router, auth_router, admins_router):
        application.include_router(router, prefix=settings.api_prefix)

    application.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir),
        name="uploads"
    )

    application.add_api_route("/", root, methods=["GET"], tags=["Health"])
    application.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])

    _register_exception_handlers(application)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("realty.main:app", host=settings.host, port=settings.port, reload=settings.debug)
