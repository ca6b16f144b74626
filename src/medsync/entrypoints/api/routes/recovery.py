"""Password recovery API routes.

Each recovery session wraps one RecoveryFlowController. Every action
returns the session view; flow failures are part of the view (the
`error` field), not HTTP errors.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from medsync.core.auth.controller import RecoveryFlowController
from medsync.core.auth.password import STRONG_ENOUGH_SCORE, password_strength, strength_label
from medsync.core.auth.sessions import RecoverySessionRegistry
from medsync.core.auth.types import Complete, RecoveryErrorCode, RecoveryMethod
from medsync.entrypoints.api.deps import get_recovery_sessions

router = APIRouter(tags=["recovery"])


# Request/Response models
class CreateSessionRequest(BaseModel):
    """Create session request body."""

    method: RecoveryMethod = RecoveryMethod.EMAIL


class IdentifierRequest(BaseModel):
    """Identifier submission body."""

    identifier: str


class OtpRequest(BaseModel):
    """Code submission body."""

    code: str


class NewPasswordRequest(BaseModel):
    """New password submission body."""

    new_password: str
    confirm_password: str


class PasswordStrengthRequest(BaseModel):
    """Password strength check body."""

    password: str


class ErrorView(BaseModel):
    """Error currently shown to the user."""

    code: RecoveryErrorCode
    message: str


class SessionView(BaseModel):
    """Current state of a recovery session."""

    session_id: str
    step: str
    method: RecoveryMethod
    identifier: str | None = None
    error: ErrorView | None = None
    info: str | None = None
    cooldown_remaining: int
    can_resend: bool
    busy: bool


class PasswordStrengthResponse(BaseModel):
    """Password strength score."""

    score: int
    label: str
    strong_enough: bool


SessionRegistry = Annotated[RecoverySessionRegistry, Depends(get_recovery_sessions)]


def _view(session_id: str, flow: RecoveryFlowController) -> SessionView:
    error = flow.error
    return SessionView(
        session_id=session_id,
        step=flow.step.name,
        method=flow.method,
        identifier=flow.identifier,
        error=ErrorView(code=error.code, message=error.message) if error else None,
        info=flow.info_message,
        cooldown_remaining=flow.cooldown_remaining,
        can_resend=flow.can_resend,
        busy=flow.busy,
    )


def get_session(session_id: str, registry: SessionRegistry) -> RecoveryFlowController:
    """Resolve a live recovery session or 404."""
    flow = registry.get(session_id)
    if flow is None:
        raise HTTPException(status_code=404, detail="Recovery session not found")
    return flow


Session = Annotated[RecoveryFlowController, Depends(get_session)]


@router.post("/sessions", response_model=SessionView, status_code=201)
async def create_session(body: CreateSessionRequest, registry: SessionRegistry) -> SessionView:
    """Start a recovery session at the identifier step."""
    session_id, flow = registry.create(method=body.method)
    return _view(session_id, flow)


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session_view(session_id: str, flow: Session) -> SessionView:
    """Get the current state of a session."""
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/identifier", response_model=SessionView)
async def submit_identifier(session_id: str, body: IdentifierRequest, flow: Session) -> SessionView:
    """Submit an email address or phone number and dispatch a code."""
    await flow.submit_identifier(body.identifier)
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/method", response_model=SessionView)
async def switch_method(session_id: str, flow: Session) -> SessionView:
    """Switch between email and SMS on the identifier step."""
    flow.switch_method()
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/otp", response_model=SessionView)
async def submit_otp(session_id: str, body: OtpRequest, flow: Session) -> SessionView:
    """Verify a one-time code."""
    await flow.submit_otp(body.code)
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/otp/resend", response_model=SessionView)
async def resend_otp(session_id: str, flow: Session) -> SessionView:
    """Resend the code once the cooldown has run out."""
    await flow.resend_otp()
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/change-identifier", response_model=SessionView)
async def change_identifier(session_id: str, flow: Session) -> SessionView:
    """Go back to the identifier form."""
    flow.change_identifier()
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/password", response_model=SessionView)
async def submit_new_password(
    session_id: str,
    body: NewPasswordRequest,
    flow: Session,
    registry: SessionRegistry,
) -> SessionView:
    """Set the new password.

    A completed session is discarded; the completion view is still returned.
    """
    await flow.submit_new_password(body.new_password, body.confirm_password)
    view = _view(session_id, flow)
    if isinstance(flow.step, Complete):
        registry.discard(session_id)
    return view


@router.post("/sessions/{session_id}/back", response_model=SessionView)
async def back(session_id: str, flow: Session) -> SessionView:
    """Move back one step."""
    flow.back()
    return _view(session_id, flow)


@router.delete("/sessions/{session_id}", status_code=204)
async def abandon_session(session_id: str, registry: SessionRegistry) -> Response:
    """Abandon a session (user navigated away)."""
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail="Recovery session not found")
    return Response(status_code=204)


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def check_password_strength(body: PasswordStrengthRequest) -> PasswordStrengthResponse:
    """Score a candidate password for the strength meter."""
    score = password_strength(body.password)
    return PasswordStrengthResponse(
        score=score,
        label=strength_label(score),
        strong_enough=score >= STRONG_ENOUGH_SCORE,
    )
