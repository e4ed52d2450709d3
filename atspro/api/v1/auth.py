from fastapi import APIRouter, Depends

from atspro.core.config import Settings
from atspro.core.errors import IdentityError
from atspro.core.security import current_session, get_gate, get_settings, get_workspace, require_session
from atspro.identity.gate import IdentityGate, Session
from atspro.presentation.view import present_error, present_session
from atspro.schemas.workspace import AuthConfigView, AuthStateView, SignInRequest
from atspro.services.workspace_service import WorkspaceService

router = APIRouter()


def _auth_state(
    session: Session | None,
    workspace: WorkspaceService,
    token: str | None = None,
) -> AuthStateView:
    return AuthStateView(
        session=present_session(session),
        session_token=token,
        error=present_error(workspace.state.error),
    )


@router.get("/auth/config", response_model=AuthConfigView)
async def auth_config(config: Settings = Depends(get_settings), gate: IdentityGate = Depends(get_gate)):
    return AuthConfigView(enabled=gate.enabled, firebase=config.firebase_web_config())


@router.get("/auth/session", response_model=AuthStateView)
async def auth_session(
    session: Session | None = Depends(current_session),
    workspace: WorkspaceService = Depends(get_workspace),
):
    return _auth_state(session, workspace)


@router.post("/auth/sign-in", response_model=AuthStateView)
async def auth_sign_in(
    payload: SignInRequest,
    gate: IdentityGate = Depends(get_gate),
    workspace: WorkspaceService = Depends(get_workspace),
):
    try:
        session = await gate.sign_in(payload.id_token)
    except IdentityError as exc:
        workspace.record_error(exc)
        return _auth_state(None, workspace)
    workspace.dismiss_error()
    return _auth_state(session, workspace, gate.session_token)


@router.post("/auth/sign-out", response_model=AuthStateView, dependencies=[Depends(require_session)])
async def auth_sign_out(gate: IdentityGate = Depends(get_gate), workspace: WorkspaceService = Depends(get_workspace)):
    await gate.sign_out()
    return _auth_state(None, workspace)
