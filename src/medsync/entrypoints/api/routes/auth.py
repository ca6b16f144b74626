"""Auth API routes for login."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from medsync.adapters.auth.credentials import InMemoryCredentialStore
from medsync.entrypoints.api.deps import get_credential_store

router = APIRouter(tags=["auth"])


# Request/Response models
class LoginRequest(BaseModel):
    """Login request body."""

    identifier: str
    password: str


class LoginResponse(BaseModel):
    """Login response."""

    identifier: str
    authenticated: bool = True


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    store: Annotated[InMemoryCredentialStore, Depends(get_credential_store)],
) -> LoginResponse:
    """Check an email/phone and password pair.

    Args:
        body: Login credentials.
        store: Credential store.

    Returns:
        The authenticated identifier.

    Raises:
        HTTPException: 401 if the credentials do not match.
    """
    if not await store.verify_credentials(body.identifier, body.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(identifier=body.identifier)
