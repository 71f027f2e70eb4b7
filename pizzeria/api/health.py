"""
Pizzeria Orders — Health endpoint
"""
import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from pizzeria.core.config import get_settings
from pizzeria.core.redis_client import get_redis
from pizzeria.db.database import engine

settings = get_settings()
router = APIRouter(tags=["health"])


async def _ping_database() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


@router.get("/health")
async def health_check():
    deps: dict[str, str] = {}

    checks = {
        "postgres": _ping_database(),
        "redis": get_redis().ping(),
    }
    for name, check in checks.items():
        try:
            await asyncio.wait_for(check, timeout=settings.HEALTH_CHECK_TIMEOUT)
            deps[name] = "ok"
        except Exception as e:
            deps[name] = f"error: {str(e)[:100]}"

    healthy = all(v == "ok" for v in deps.values())
    return JSONResponse(
        content={
            "status": "healthy" if healthy else "degraded",
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "dependencies": deps,
        },
        status_code=200 if healthy else 503,
    )
