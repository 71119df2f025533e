from typing import Annotated, cast

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sessionkeeper.app import App
from sessionkeeper.core.modules.session.models import SessionGrant
from sessionkeeper.errors import AuthenticationError
from sessionkeeper.web.cookies import set_session_cookie

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_user_id(request: Request, app: Annotated[App, Depends(get_app)]) -> str:
    """Get the authenticated user id placed on the request by the upstream auth layer."""
    user_id = request.headers.get(app.config.user_id_header, "").strip()
    if not user_id:
        raise AuthenticationError
    return user_id


async def get_session_token(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> str | None:
    """Get the caller's current session token from the Authorization Bearer header or cookie."""
    # Check Bearer token first (preferred)
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(app.config.session_cookie_name)


async def get_session_grant(
    app: Annotated[App, Depends(get_app)],
    user_id: Annotated[str, Depends(get_user_id)],
    token: Annotated[str | None, Depends(get_session_token)],
    response: Response,
) -> SessionGrant:
    """Issue or renew the session and refresh the cookie on the outgoing response."""
    grant = app.handle_session(user_id, token)
    set_session_cookie(response, app.config, grant)
    return grant


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
UserIdDep = Annotated[str, Depends(get_user_id)]
SessionTokenDep = Annotated[str | None, Depends(get_session_token)]
SessionGrantDep = Annotated[SessionGrant, Depends(get_session_grant)]
