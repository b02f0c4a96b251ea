import logging
import time

from fastapi import APIRouter

from app.dependencies import CacheDep, StartedAtDep
from app.schemas.responses import CacheClearResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def index() -> dict:
    return {
        "message": "Zalo Proxy Server",
        "endpoints": {
            "health": "/health",
            "api": "/api/lookup?phone=0398981698",
            "debug": "/api/debug?phone=0398981698",
            "clearCache": "/cache/clear (POST)",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health(cache: CacheDep, started_at: StartedAtDep) -> HealthResponse:
    return HealthResponse(
        status="OK",
        cache_size=cache.size(),
        uptime=round(time.monotonic() - started_at, 3),
    )


@router.post("/cache/clear", response_model=CacheClearResponse)
async def clear_cache(cache: CacheDep) -> CacheClearResponse:
    cleared = cache.clear()
    logger.info("Cache cleared (%d entries)", cleared)
    return CacheClearResponse(message="Cache cleared", cleared=cleared, cache_size=cache.size())
