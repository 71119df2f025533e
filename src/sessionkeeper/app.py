from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sessionkeeper.config import Config
from sessionkeeper.core.core import Core
from sessionkeeper.core.modules.session.models import SessionGrant
from sessionkeeper.core.modules.session.store import SessionStore
from sessionkeeper.errors import AuthenticationError


class App:
    """Facade for all application operations used by the web layer."""

    def __init__(self, config: Config, store: SessionStore | None = None) -> None:
        self._core = Core(config, store)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    def handle_session(self, user_id: str, token: str | None) -> SessionGrant:
        """Issue a fresh session or renew the current one for an authenticated user."""
        if not user_id:
            raise AuthenticationError
        return self._core.services.session.issue_or_renew(user_id, token)

    def logout(self, token: str | None) -> None:
        """Revoke the current session, if any."""
        self._core.services.session.revoke(token)

    def active_session_count(self) -> int:
        return self._core.services.session.count()
