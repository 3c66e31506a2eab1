"""Landing page."""

import os

from fastapi import APIRouter
from fastapi.responses import FileResponse

from snaplink.core.config import settings

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def index():
    return FileResponse(os.path.join(settings.STATIC_DIR, "index.html"), media_type="text/html")
