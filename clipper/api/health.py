from fastapi import APIRouter

from clipper.config.settings import config
from clipper.core.state import state
from clipper.i18n import i18n

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint"""
    return {
        "status": i18n.get("health.running"),
        "service": config.api.title,
        "version": config.api.version,
        "ytdlp_version": state.ytdlp_version,
    }


@router.get("/health")
async def health_check():
    """Lightweight health check"""
    return {"status": i18n.get("health.status")}
