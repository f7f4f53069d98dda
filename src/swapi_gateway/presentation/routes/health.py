"""Health route."""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Simple liveness / readiness check."""
    return {"status": "ok"}
