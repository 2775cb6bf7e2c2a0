from fastapi import APIRouter

from vidrelay.config.settings import config
from vidrelay.core.state import state
from vidrelay.i18n import i18n

router = APIRouter()


@router.get("/health")
async def health_check():
    """Lightweight health check"""
    return {"status": i18n.get("health.status")}


@router.get("/health/full")
async def health_check_full():
    """Detailed health check"""
    return {
        "status": i18n.get("health.status"),
        "service": config.api.title,
        "version": config.api.version,
        "ytdlp_version": state.ytdlp_version,
        "js_runtime": state.js_runtime,
    }
