from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "127.0.0.1"
    port: int = 3100
    debug: bool = False
    # Session lifetime policy
    sliding_window_seconds: int = 30 * 60  # Expiry granted on issue and on every renewal
    renewal_threshold_seconds: int = 5 * 60  # Renew only when less than this remains
    max_lifetime_seconds: int = 24 * 60 * 60  # No renewal past this age
    # Background cleanup of expired sessions, 0 disables the sweeper
    sweep_interval_seconds: int = Field(default=5 * 60, ge=0)
    sweep_grace_seconds: int = Field(default=0, ge=0)  # Keep expired sessions this long before removal
    # Cookie and upstream identity
    session_cookie_name: str = "session_token"
    cookie_secure: bool = True
    cookie_samesite: Literal["strict", "lax", "none"] = "strict"
    user_id_header: str = "X-User-Id"  # Set by the upstream authentication proxy
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SESSIONKEEPER_",
        "extra": "ignore",
    }
