from fastapi import Response

from sessionkeeper.config import Config
from sessionkeeper.core.modules.session.models import SessionGrant


def set_session_cookie(response: Response, config: Config, grant: SessionGrant) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=grant.token,
        expires=grant.expires,
        path="/",
        httponly=True,
        secure=config.cookie_secure,
        samesite=config.cookie_samesite,
    )


def clear_session_cookie(response: Response, config: Config) -> None:
    # Attributes must match the ones used when setting, or browsers keep the cookie
    response.delete_cookie(
        key=config.session_cookie_name,
        path="/",
        httponly=True,
        secure=config.cookie_secure,
        samesite=config.cookie_samesite,
    )
