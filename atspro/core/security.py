from __future__ import annotations

from fastapi import Header, HTTPException, Request, status

from atspro.core.config import Settings
from atspro.identity.gate import IdentityGate, Session
from atspro.services.workspace_service import WorkspaceService

SESSION_HEADER = "X-Session-Token"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gate(request: Request) -> IdentityGate:
    return request.app.state.identity_gate


def get_workspace(request: Request) -> WorkspaceService:
    return request.app.state.workspace


def current_session(
    request: Request,
    x_session_token: str | None = Header(default=None),
) -> Session | None:
    return get_gate(request).authenticate(x_session_token)


def require_session(
    request: Request,
    x_session_token: str | None = Header(default=None),
) -> Session:
    session = current_session(request, x_session_token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please sign in to continue.",
        )
    return session
