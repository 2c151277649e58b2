"""Unit tests for exception handlers: error taxonomy to failure envelopes."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mapcrud.runtime.errors import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    MapcrudError,
    NotFoundError,
    ValidationFailedError,
)


def _request(path: str = "/payments/1", method: str = "GET") -> MagicMock:
    request = MagicMock()
    request.url.path = path
    request.method = method
    return request


@pytest.fixture
def handlers() -> dict[type, Any]:
    """Capture the handlers registered by register_exception_handlers."""
    from mapcrud.runtime.exception_handlers import register_exception_handlers

    app = MagicMock()
    captured: dict[type, Any] = {}

    def capture_handler(exc_class: type) -> Any:
        def decorator(fn: Any) -> Any:
            captured[exc_class] = fn
            return fn

        return decorator

    app.exception_handler = capture_handler
    register_exception_handlers(app)
    return captured


class TestRegistration:
    """Test which exception types get a handler."""

    def test_registers_taxonomy(self, handlers: dict[type, Any]) -> None:
        assert set(handlers) == {
            ValidationFailedError,
            MapcrudError,
            RequestValidationError,
            StarletteHTTPException,
            Exception,
        }


class TestMapcrudErrors:
    """Test that core errors map to their status codes."""

    @pytest.mark.asyncio
    async def test_validation_failed_lists_messages(self, handlers: dict[type, Any]) -> None:
        exc = ValidationFailedError(["amount must be a number", "currency should not be empty"])
        response = await handlers[ValidationFailedError](_request("/payments", "POST"), exc)

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["statusCode"] == 400
        assert body["path"] == "/payments"
        assert body["message"] == ["amount must be a number", "currency should not be empty"]

    @pytest.mark.asyncio
    async def test_not_found(self, handlers: dict[type, Any]) -> None:
        response = await handlers[MapcrudError](_request(), NotFoundError("Payment", 1))

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body["message"] == "Payment with ID 1 not found"
        assert body["timestamp"].endswith("Z")

    @pytest.mark.asyncio
    async def test_business_rule(self, handlers: dict[type, Any]) -> None:
        exc = BusinessRuleViolationError("Can only refund completed payments")
        response = await handlers[MapcrudError](_request(), exc)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_transition(self, handlers: dict[type, Any]) -> None:
        exc = InvalidTransitionError("pending", "refunded")
        response = await handlers[MapcrudError](_request(), exc)

        assert response.status_code == 400
        assert json.loads(response.body)["message"] == (
            "Invalid status transition from pending to refunded"
        )


class TestFrameworkErrors:
    """Test framework-raised errors."""

    @pytest.mark.asyncio
    async def test_request_validation_is_400(self, handlers: dict[type, Any]) -> None:
        exc = RequestValidationError(
            [{"loc": ("path", "id"), "msg": "Input should be a valid integer", "type": "int"}]
        )
        response = await handlers[RequestValidationError](_request("/payments/abc"), exc)

        assert response.status_code == 400
        assert json.loads(response.body)["message"] == [
            "path.id Input should be a valid integer"
        ]

    @pytest.mark.asyncio
    async def test_http_exception_keeps_status(self, handlers: dict[type, Any]) -> None:
        exc = StarletteHTTPException(status_code=405, detail="Method Not Allowed")
        response = await handlers[StarletteHTTPException](_request(), exc)

        assert response.status_code == 405
        assert json.loads(response.body)["message"] == "Method Not Allowed"

    @pytest.mark.asyncio
    async def test_unhandled_hides_details(self, handlers: dict[type, Any]) -> None:
        response = await handlers[Exception](_request(), RuntimeError("secret"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["message"] == "Internal server error"
        assert b"secret" not in response.body
