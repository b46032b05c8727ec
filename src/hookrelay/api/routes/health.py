"""Health check endpoint."""

from fastapi import APIRouter

from hookrelay import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "hookrelay", "version": __version__}
