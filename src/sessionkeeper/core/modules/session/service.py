import asyncio
import contextlib
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from sessionkeeper.core.core import Service
from sessionkeeper.core.modules.session.models import AuthToken, Session, SessionGrant, SessionPolicy
from sessionkeeper.core.modules.session.store import SessionStore
from sessionkeeper.errors import TokenGenerationError
from sessionkeeper.utils import now, token_prefix

logger = structlog.get_logger(__name__)

TOKEN_BYTES = 32  # 256 bits, 64 hex characters


class SessionService(Service):
    """Service for issuing, renewing and revoking login sessions."""

    def __init__(
        self,
        store: SessionStore,
        policy: SessionPolicy | None = None,
        clock: Callable[[], datetime] = now,
        sweep_interval: float = 0,
        sweep_grace: timedelta = timedelta(0),
    ) -> None:
        super().__init__(store)
        self.policy = policy or SessionPolicy()
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._sweep_grace = max(sweep_grace, timedelta(0))
        self._sweep_task: asyncio.Task[None] | None = None

    async def on_start(self) -> None:
        """Start the background sweeper if enabled."""
        if self._sweep_interval > 0:
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.debug("session_sweeper_started", interval=self._sweep_interval)

    async def on_stop(self) -> None:
        """Cancel the background sweeper."""
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweep_task
        self._sweep_task = None
        logger.debug("session_sweeper_stopped")

    @staticmethod
    def generate_token() -> AuthToken:
        try:
            return AuthToken(secrets.token_hex(TOKEN_BYTES))
        except (OSError, NotImplementedError) as e:
            raise TokenGenerationError("Secure random source is unavailable") from e

    def issue_or_renew(self, user_id: str, token: str | None) -> SessionGrant:
        """Return a valid session for user_id, reusing token when it is still good.

        Unknown, foreign or expired tokens never raise: a fresh session is issued
        instead. A session is extended only when less than the renewal threshold
        remains and it is younger than the maximum lifetime.
        """
        while True:
            at = self._clock()
            session = self.store.get(AuthToken(token)) if token else None

            reason: str | None = None
            if session is None:
                reason = "unknown_token"
            elif session.user_id != user_id:
                reason = "user_mismatch"
            elif session.is_expired(at):
                reason = "expired"

            if session is None or reason is not None:
                if token:
                    logger.info("session_fallback", reason=reason, user_id=user_id, token=token_prefix(token))
                return self._issue(user_id, at)

            if session.remaining(at) < self.policy.renewal_threshold and session.age(at) < self.policy.max_lifetime:
                renewed = session.model_copy(update={"expires_at": at + self.policy.sliding_window})
                if not self.store.compare_and_set(session, renewed):
                    # Another caller changed or revoked this session, evaluate again
                    continue
                logger.debug("session_renewed", user_id=user_id, token=token_prefix(token), expires=renewed.expires_at)
                return SessionGrant(token=renewed.token, expires=renewed.expires_at)

            return SessionGrant(token=session.token, expires=session.expires_at)

    def revoke(self, token: str | None) -> None:
        """Remove the session for token. Unknown tokens are ignored."""
        if not token:
            return
        if self.store.delete(AuthToken(token)):
            logger.debug("session_revoked", token=token_prefix(token))

    def get_session(self, token: str | None) -> Session | None:
        """Get the stored session for token, or None if absent or expired."""
        if not token:
            return None
        session = self.store.get(AuthToken(token))
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    def count(self) -> int:
        return len(self.store)

    def sweep_expired(self, grace: timedelta | None = None) -> int:
        """Remove sessions that expired more than grace ago.

        A negative grace is treated as zero so live sessions are never removed.
        """
        if grace is None:
            grace = self._sweep_grace
        cutoff = self._clock() - max(grace, timedelta(0))
        removed = self.store.remove_expired(cutoff)
        if removed:
            logger.info("sessions_swept", removed=removed, remaining=len(self.store))
        return removed

    def _issue(self, user_id: str, at: datetime) -> SessionGrant:
        while True:
            session = Session(
                token=self.generate_token(),
                user_id=user_id,
                created_at=at,
                expires_at=at + self.policy.sliding_window,
            )
            if self.store.insert(session):
                break
        logger.debug("session_issued", user_id=user_id, token=token_prefix(session.token), expires=session.expires_at)
        return SessionGrant(token=session.token, expires=session.expires_at)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep_expired()
