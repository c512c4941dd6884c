import logging

from fastapi import APIRouter
from fmw2.config import settings

logger = logging.getLogger("fmw2.api.system")
router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok", "version": settings.app.version}
