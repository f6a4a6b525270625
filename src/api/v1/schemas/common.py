"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Body of every error response, documented on each route."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "USER_NOT_FOUND",
                "message": "User not found",
                "details": {"identifier": "someone@example.com"},
            }
        }
    )

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. ``{"message": "User deleted"}``."""

    message: str
