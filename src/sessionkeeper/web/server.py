from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sessionkeeper.app import App
from sessionkeeper.config import Config
from sessionkeeper.errors import TokenGenerationError, UserError
from sessionkeeper.web.error_handlers import general_exception_handler, token_generation_error_handler, user_error_handler
from sessionkeeper.web.openapi import set_custom_openapi
from sessionkeeper.web.routers import auth_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Sessionkeeper API",
        lifespan=lifespan,
    )
    # Available before lifespan runs so requests in tests without a lifespan still resolve deps
    app.state.app = app_instance

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str | int]:
        return {"status": "healthy", "active_sessions": app_instance.active_session_count()}

    app.include_router(auth_router, prefix="/api/v1")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(TokenGenerationError, token_generation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config)

    return app
