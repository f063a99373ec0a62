"""
Converts every failure into the catalogue's error envelope:

    {"error": {"code", "message", "timestamp", "request_id", "details"?}}

``details`` only appears for validation failures, as a list of
{"field", "message"} entries.
"""

from typing import Dict, Any, Optional, List
from datetime import datetime, timezone
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from realty.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

STATUS_ERROR_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    500: "INTERNAL_SERVER_ERROR",
}

# Substring of the driver message -> public description
CONSTRAINT_MESSAGES = (
    ("unique", "Duplicate value for unique field"),
    ("foreign key", "Referenced record does not exist"),
    ("not null", "Required field cannot be empty"),
    ("check constraint", "Value does not meet validation requirements"),
)

REQUEST_LOCATIONS = ("body", "query", "path", "header", "form")


class ErrorHandlerService:
    """Builds error responses and logs them with a short request id."""

    @classmethod
    def format_error_response(
        cls,
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": cls._get_current_timestamp(),
        }
        if request_id:
            body["request_id"] = request_id
        if details:
            body["details"] = details
        return {"error": body}

    @classmethod
    def _respond(
        cls,
        status_code: int,
        error_code: str,
        message: str,
        request_id: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=cls.format_error_response(error_code, message, details, request_id),
            headers=headers
        )

    @staticmethod
    def _path(request: Optional[Request]) -> Optional[str]:
        return request.url.path if request is not None else None

    @classmethod
    def handle_api_exception(
        cls,
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Domain exceptions keep their status, code and headers."""
        request_id = cls._generate_request_id()
        level = logging.ERROR if exception.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            f"[{request_id}] {exception.error_code} on {cls._path(request)}: {exception.detail}",
            extra={"request_id": request_id, "status_code": exception.status_code}
        )

        return cls._respond(
            exception.status_code,
            exception.error_code or STATUS_ERROR_CODES.get(exception.status_code, "API_ERROR"),
            exception.detail,
            request_id,
            details=exception.field_errors if isinstance(exception, ValidationError) else None,
            headers=exception.headers
        )

    @classmethod
    def handle_validation_error(
        cls,
        exception: RequestValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Framework validation failures (bad JSON, unparsable path ids) become 400."""
        request_id = cls._generate_request_id()

        details = []
        for error in exception.errors():
            location = [str(part) for part in error.get("loc", ())]
            if len(location) > 1 and location[0] in REQUEST_LOCATIONS:
                location = location[1:]
            details.append({
                "field": ".".join(location),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type"),
            })

        logger.warning(
            f"[{request_id}] request validation failed on {cls._path(request)} "
            f"({len(details)} errors)",
            extra={"request_id": request_id}
        )
        return cls._respond(400, "VALIDATION_ERROR", "Request validation failed", request_id, details=details)

    @classmethod
    def handle_database_error(
        cls,
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Constraint violations are 409; any other database failure is an opaque 500."""
        request_id = cls._generate_request_id()
        logger.error(
            f"[{request_id}] database error on {cls._path(request)}: "
            f"{type(exception).__name__}: {exception}",
            extra={"request_id": request_id},
            exc_info=True
        )

        if not isinstance(exception, IntegrityError):
            return cls._respond(500, "INTERNAL_SERVER_ERROR", "Database operation failed", request_id)

        constraint = cls._extract_constraint_info(exception)
        message = f"Constraint violation: {constraint}" if constraint else "Data integrity constraint violation"
        return cls._respond(409, "CONFLICT", message, request_id)

    @classmethod
    def handle_http_exception(
        cls,
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Routing errors raised by the framework itself, e.g. unknown paths."""
        request_id = cls._generate_request_id()
        logger.warning(
            f"[{request_id}] HTTP {exception.status_code} on {cls._path(request)}: {exception.detail}",
            extra={"request_id": request_id}
        )

        return cls._respond(
            exception.status_code,
            STATUS_ERROR_CODES.get(exception.status_code, f"HTTP_{exception.status_code}"),
            str(exception.detail),
            request_id,
            headers=getattr(exception, "headers", None)
        )

    @classmethod
    def handle_unexpected_error(
        cls,
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        request_id = cls._generate_request_id()
        logger.error(
            f"[{request_id}] unhandled {type(exception).__name__} on {cls._path(request)}",
            extra={"request_id": request_id},
            exc_info=exception
        )
        return cls._respond(
            500,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later.",
            request_id
        )

    @staticmethod
    def _generate_request_id() -> str:
        return uuid.uuid4().hex[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        """UTC time in ISO-8601 with a trailing 'Z'."""
        return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        driver_message = str(exception.orig).lower()
        for needle, description in CONSTRAINT_MESSAGES:
            if needle in driver_message:
                return description
        return None
