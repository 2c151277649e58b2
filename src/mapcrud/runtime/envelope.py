"""
Response envelopes.

Every response leaving the HTTP boundary is wrapped: successful handlers in
``SuccessEnvelope``, errors in ``FailureEnvelope``. The core only produces the
``data`` payload or raises; envelopes are assembled here.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from mapcrud.runtime.entity import to_plain

STATUS_MESSAGES: dict[int, str] = {
    200: "Success",
    201: "Created successfully",
    204: "No content",
}


def utc_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def status_message(status_code: int) -> str:
    return STATUS_MESSAGES.get(status_code, "Success")


class SuccessEnvelope(BaseModel):
    """Wrapper for successful responses."""

    data: Any = Field(description="Response payload")
    message: str = Field(description="Human-readable status message")
    status_code: int = Field(serialization_alias="statusCode", description="HTTP status code")
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO-8601 timestamp")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def wrap(cls, data: Any, status_code: int = 200) -> SuccessEnvelope:
        return cls(
            data=to_plain(data, deep=True),
            message=status_message(status_code),
            status_code=status_code,
        )


class FailureEnvelope(BaseModel):
    """Wrapper for error responses."""

    status_code: int = Field(serialization_alias="statusCode", description="HTTP status code")
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO-8601 timestamp")
    path: str = Field(description="Request path")
    message: str | list[str] = Field(description="Error message or messages")

    model_config = ConfigDict(populate_by_name=True)


def envelope_response(data: Any, status_code: int = 200) -> JSONResponse:
    """Build a JSON response with ``data`` wrapped in the success envelope."""
    envelope = SuccessEnvelope.wrap(data, status_code)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
    )


def failure_response(status_code: int, path: str, message: str | list[str]) -> JSONResponse:
    """Build a JSON response carrying the failure envelope."""
    envelope = FailureEnvelope(status_code=status_code, path=path, message=message)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
    )
