from datetime import datetime

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from sessionkeeper.web.cookies import clear_session_cookie
from sessionkeeper.web.deps import AppDep, SessionGrantDep, SessionTokenDep
from sessionkeeper.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class SessionResponse(BaseModel):
    """Current session token and its expiry."""

    token: str = Field(..., description="Session token, also set as an HTTP-only cookie")
    expires: datetime = Field(..., description="Moment the session expires unless renewed")


@router.post(
    "/auth/session",
    summary="Issue or renew session",
    description=(
        "Return a valid session for the authenticated user. The current token is renewed when it is "
        "close to expiry, reused when it still has time left, and replaced when it is unknown or expired."
    ),
    operation_id="issueOrRenewSession",
    responses={
        200: {"description": "Session issued, renewed or unchanged"},
        401: {"model": ErrorResponse, "description": "No authenticated user on the request"},
    },
)
async def issue_or_renew_session(grant: SessionGrantDep) -> SessionResponse:
    return SessionResponse(token=grant.token, expires=grant.expires)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Revoke the current session token and clear the session cookie.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Session revoked or already absent"},
    },
)
async def logout(app: AppDep, token: SessionTokenDep, response: Response) -> None:
    app.logout(token)
    clear_session_cookie(response, app.config)
