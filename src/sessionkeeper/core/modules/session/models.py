"""Session management models."""

from datetime import datetime, timedelta
from typing import NewType, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sessionkeeper.config import Config

AuthToken = NewType("AuthToken", str)


class Session(BaseModel):
    """User login session.

    Records are immutable: a renewal builds a new record and swaps it into the
    store, so a reader never observes a half-updated session.
    """

    token: AuthToken
    user_id: str
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    def is_expired(self, at: datetime) -> bool:
        return self.expires_at < at

    def remaining(self, at: datetime) -> timedelta:
        return self.expires_at - at

    def age(self, at: datetime) -> timedelta:
        return at - self.created_at


class SessionGrant(BaseModel):
    """Token and expiry handed back to the caller after issue or renewal."""

    token: AuthToken
    expires: datetime


class SessionPolicy(BaseModel):
    """Sliding-window and absolute-lifetime settings for sessions."""

    sliding_window: timedelta = Field(default=timedelta(minutes=30))
    renewal_threshold: timedelta = Field(default=timedelta(minutes=5))
    max_lifetime: timedelta = Field(default=timedelta(hours=24))

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_durations(self) -> Self:
        for name in ("sliding_window", "renewal_threshold", "max_lifetime"):
            if getattr(self, name) <= timedelta(0):
                raise ValueError(f"{name} must be positive")
        if self.renewal_threshold >= self.sliding_window:
            raise ValueError("renewal_threshold must be shorter than sliding_window")
        return self

    @classmethod
    def from_config(cls, config: Config) -> Self:
        return cls(
            sliding_window=timedelta(seconds=config.sliding_window_seconds),
            renewal_threshold=timedelta(seconds=config.renewal_threshold_seconds),
            max_lifetime=timedelta(seconds=config.max_lifetime_seconds),
        )
