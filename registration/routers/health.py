# ================================
# file: registration/routers/health.py
# ================================
from fastapi import APIRouter
from datetime import datetime, timezone

from ..core.config import settings

router = APIRouter()

@router.get("/health")
def health():
    return {"ok": True, "service": settings.SERVICE_NAME, "time": datetime.now(timezone.utc).isoformat()}
