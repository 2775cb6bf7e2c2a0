import os
from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "static")

router = APIRouter()


@router.get("/", include_in_schema=False)
async def index():
    """Single page UI"""
    return FileResponse(os.path.join(STATIC_DIR, "index.html"), media_type="text/html")
