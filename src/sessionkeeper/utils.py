from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def token_prefix(token: str | None) -> str:
    """Shortened token for log output, never the full secret."""
    if not token:
        return ""
    return token[:8]
