"""Health check endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from datetime import datetime, timezone

from topology_registry.api.dependencies import get_context
from topology_registry.context import RegistryContext

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check():
    """Liveness probe - basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(ctx: RegistryContext = Depends(get_context)):
    """Readiness probe - checks record store connectivity."""
    try:
        await ctx.store.kv.ping()
        return {
            "status": "ready",
            "checks": {
                "store": True,
            },
        }
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "error": str(e)},
        )
