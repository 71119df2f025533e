from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from sessionkeeper.config import Config


def set_custom_openapi(app: FastAPI, config: Config) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Sessionkeeper API",
            version="0.1.0",
            summary="Sliding-expiration login sessions for authenticated users",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Session token (preferred)",
            },
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": config.session_cookie_name,
                "description": "Session token stored in cookie",
            },
            "UpstreamUser": {
                "type": "apiKey",
                "in": "header",
                "name": config.user_id_header,
                "description": "Authenticated user id set by the upstream auth layer",
            },
        }

        openapi_schema["security"] = [
            {"UpstreamUser": [], "BearerAuth": []},
            {"UpstreamUser": [], "SessionCookie": []},
        ]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Authentication required", "type": "authentication_error"},
                {"message": "An unexpected error occurred.", "type": "internal_server_error"},
            ]
        }
    }
