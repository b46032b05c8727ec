"""Master API router."""

from fastapi import APIRouter

from hookrelay.api.routes import health, webhook

api_router = APIRouter()
api_router.include_router(health.router, tags=["Health"])
# Catch-all delivery path, must stay last
api_router.include_router(webhook.router)
