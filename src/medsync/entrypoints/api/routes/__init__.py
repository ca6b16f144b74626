"""API route modules."""

from fastapi import APIRouter

from medsync.entrypoints.api.routes.auth import router as auth_router
from medsync.entrypoints.api.routes.recovery import router as recovery_router
from medsync.entrypoints.api.routes.verification import router as verification_router

# Create main API router
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth")
api_router.include_router(recovery_router, prefix="/recovery")
api_router.include_router(verification_router, prefix="/verification")

__all__ = ["api_router"]
