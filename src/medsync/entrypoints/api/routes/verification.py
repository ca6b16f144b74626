"""Sign-up e-mail verification API routes.

Creating a session sends the first code. A verified session is discarded;
the final view is still returned.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, EmailStr

from medsync.core.auth.sessions import VerificationSessionRegistry
from medsync.core.auth.verification import EmailVerificationController
from medsync.entrypoints.api.deps import get_verification_sessions
from medsync.entrypoints.api.routes.recovery import ErrorView

router = APIRouter(tags=["verification"])


# Request/Response models
class StartVerificationRequest(BaseModel):
    """Start verification request body."""

    email: EmailStr


class CodeRequest(BaseModel):
    """Code submission body."""

    code: str


class VerificationView(BaseModel):
    """Current state of a verification session."""

    session_id: str
    email: str
    verified: bool
    error: ErrorView | None = None
    info: str | None = None
    cooldown_remaining: int
    can_resend: bool
    busy: bool


Registry = Annotated[VerificationSessionRegistry, Depends(get_verification_sessions)]


def _view(session_id: str, flow: EmailVerificationController) -> VerificationView:
    error = flow.error
    return VerificationView(
        session_id=session_id,
        email=flow.email,
        verified=flow.verified,
        error=ErrorView(code=error.code, message=error.message) if error else None,
        info=flow.info_message,
        cooldown_remaining=flow.cooldown_remaining,
        can_resend=flow.can_resend and not flow.verified,
        busy=flow.busy,
    )


def get_verification(session_id: str, registry: Registry) -> EmailVerificationController:
    """Resolve a live verification session or 404."""
    flow = registry.get(session_id)
    if flow is None:
        raise HTTPException(status_code=404, detail="Verification session not found")
    return flow


Verification = Annotated[EmailVerificationController, Depends(get_verification)]


@router.post("/sessions", response_model=VerificationView, status_code=201)
async def start_verification(
    body: StartVerificationRequest, registry: Registry
) -> VerificationView:
    """Start verifying an address and send the first code."""
    session_id, flow = registry.create(str(body.email))
    await flow.send()
    return _view(session_id, flow)


@router.get("/sessions/{session_id}", response_model=VerificationView)
async def get_verification_view(session_id: str, flow: Verification) -> VerificationView:
    """Get the current state of a session."""
    return _view(session_id, flow)


@router.post("/sessions/{session_id}/code", response_model=VerificationView)
async def submit_code(
    session_id: str,
    body: CodeRequest,
    flow: Verification,
    registry: Registry,
) -> VerificationView:
    """Verify a typed code."""
    await flow.submit_code(body.code)
    view = _view(session_id, flow)
    if flow.verified:
        registry.discard(session_id)
    return view


@router.post("/sessions/{session_id}/resend", response_model=VerificationView)
async def resend_code(session_id: str, flow: Verification) -> VerificationView:
    """Send a new code once the cooldown has run out."""
    await flow.resend()
    return _view(session_id, flow)


@router.delete("/sessions/{session_id}", status_code=204)
async def abandon_verification(session_id: str, registry: Registry) -> Response:
    """Abandon a session."""
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail="Verification session not found")
    return Response(status_code=204)
