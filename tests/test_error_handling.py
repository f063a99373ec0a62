"""
Tests for error response formatting.
Covers the exception hierarchy, ErrorHandlerService and the envelope returned over HTTP.
"""

import json
import pytest
from unittest.mock import Mock

from fastapi import status
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from realty.services.error_handler import ErrorHandlerService
from realty.utils.exceptions import (
    ValidationError,
    AuthError,
    InsufficientPermissionsError,
    SelfModificationError,
    PropertyNotFoundError,
    DuplicateError,
    ServerError,
    FileSizeExceededError
)


class TestExceptionHierarchy:
    """Status codes and error codes of the domain exceptions."""

    @pytest.mark.parametrize("exception,status_code,error_code", [
        (ValidationError("bad"), 400, "VALIDATION_ERROR"),
        (FileSizeExceededError(10, 5), 400, "VALIDATION_ERROR"),
        (AuthError(), 401, "UNAUTHORIZED"),
        (InsufficientPermissionsError("manage admins"), 403, "FORBIDDEN"),
        (SelfModificationError(), 403, "FORBIDDEN"),
        (PropertyNotFoundError("abc"), 404, "NOT_FOUND"),
        (DuplicateError("Admin", "a@example.com"), 409, "CONFLICT"),
        (ServerError(), 500, "INTERNAL_SERVER_ERROR"),
    ])
    def test_codes(self, exception, status_code, error_code):
        assert exception.status_code == status_code
        assert exception.error_code == error_code

    def test_validation_error_field_details(self):
        error = ValidationError("minPrice must be a valid number", field="minPrice")
        assert error.field_errors == [{"field": "minPrice", "message": "minPrice must be a valid number"}]

    def test_self_modification_message(self):
        assert SelfModificationError("deactivate").detail == "You cannot deactivate your own account"


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")

    def test_handle_api_exception_includes_field(self):
        response = ErrorHandlerService.handle_api_exception(ValidationError("type is required", field="type"))

        assert response.status_code == 400
        data = json.loads(response.body)
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["details"] == [{"field": "type", "message": "type is required"}]

    def test_handle_api_exception_keeps_headers(self):
        response = ErrorHandlerService.handle_api_exception(AuthError())

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert "details" not in json.loads(response.body)["error"]

    def test_handle_validation_error_strips_location(self):
        mock_error = Mock()
        mock_error.errors.return_value = [
            {"loc": ("body", "propertyId"), "msg": "Input should be a valid UUID", "type": "uuid_parsing"},
            {"loc": ("path", "admin_id"), "msg": "Invalid", "type": "uuid_parsing"},
            {"loc": ("body",), "msg": "Field required", "type": "missing"},
        ]

        response = ErrorHandlerService.handle_validation_error(mock_error)

        assert response.status_code == 400
        fields = [d["field"] for d in json.loads(response.body)["error"]["details"]]
        assert fields == ["propertyId", "admin_id", "body"]

    def test_handle_database_error(self):
        integrity = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: admin_users.email"))
        response = ErrorHandlerService.handle_database_error(integrity)
        data = json.loads(response.body)
        assert response.status_code == 409
        assert data["error"]["message"] == "Constraint violation: Duplicate value for unique field"

        operational = OperationalError("SELECT", {}, Exception("connection refused"))
        response = ErrorHandlerService.handle_database_error(operational)
        data = json.loads(response.body)
        assert response.status_code == 500
        assert "connection refused" not in data["error"]["message"]

    def test_handle_http_exception(self):
        response = ErrorHandlerService.handle_http_exception(StarletteHTTPException(404, "Not Found"))
        assert response.status_code == 404
        assert json.loads(response.body)["error"]["code"] == "NOT_FOUND"

        response = ErrorHandlerService.handle_http_exception(StarletteHTTPException(405, "Method Not Allowed"))
        assert json.loads(response.body)["error"]["code"] == "HTTP_405"

    def test_handle_unexpected_error_hides_internals(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret stack detail"))

        assert response.status_code == 500
        data = json.loads(response.body)
        assert data["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "secret" not in data["error"]["message"]


class TestErrorEnvelopeOverHTTP:
    """Every failing request returns the same error envelope."""

    @pytest.mark.asyncio
    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/nowhere")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_path_uuid(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/not-a-uuid")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "property_id"

    @pytest.mark.asyncio
    async def test_malformed_json_body(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/favorites",
            content="{not json",
            headers={"x-session-id": "s1", "content-type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_bad_query_value_names_field(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties", params={"minPrice": "cheap"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["details"] == [
            {"field": "minPrice", "message": "minPrice must be a valid number"}
        ]
