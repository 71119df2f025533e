from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING

from sessionkeeper.config import Config
from sessionkeeper.core.modules.session.store import SessionStore

if TYPE_CHECKING:
    from sessionkeeper.core.modules.session.service import SessionService


class Service:
    """Base class for services with direct access to the session store."""

    def __init__(self, store: SessionStore) -> None:
        self.store = store
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry owning every service instance."""

    session: SessionService

    def __init__(self, config: Config, store: SessionStore) -> None:
        from sessionkeeper.core.modules.session.models import SessionPolicy  # noqa: PLC0415
        from sessionkeeper.core.modules.session.service import SessionService  # noqa: PLC0415

        self.session = SessionService(
            store,
            policy=SessionPolicy.from_config(config),
            sweep_interval=config.sweep_interval_seconds,
            sweep_grace=timedelta(seconds=config.sweep_grace_seconds),
        )
        self._services: list[Service] = [self.session]

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, the session store, and all service instances."""

    config: Config
    store: SessionStore
    services: Services

    def __init__(self, config: Config, store: SessionStore | None = None) -> None:
        """Initialize core with config and a store created here unless one is injected."""
        self.config = config
        self.store = store if store is not None else SessionStore()
        self.services = Services(config, self.store)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and drop all sessions, the store lives only as long as the process."""
        await self.services.stop_all()
        self.store.clear()
