"""
Health check router.

This router provides health check endpoints for monitoring and load balancers,
plus the Prometheus scrape endpoint.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from supabase import AsyncClient

from api.deps import get_supabase_async_client
from backend.observability import get_metrics_response

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Health"],
)

SERVICE_NAME = "agent-api"


@router.get("/health")
def health():
    """
    Simple liveness endpoint for agent-api.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
async def health_ready(client: AsyncClient = Depends(get_supabase_async_client)):
    """
    Readiness probe that checks downstream dependencies.

    Verifies Supabase connectivity. Returns 503 if any dependency is unavailable.
    """
    checks = {}

    if client is None:
        checks["supabase"] = "not_configured"
    else:
        try:
            # Lightweight query to verify connectivity
            await client.table("profiles").select("id").limit(1).execute()
            checks["supabase"] = "ok"
        except Exception as e:
            logger.warning("Readiness check failed for supabase: %s", e)
            checks["supabase"] = "unavailable"
            return JSONResponse(
                status_code=503,
                content={
                    "status": "not_ready",
                    "service": SERVICE_NAME,
                    "checks": checks,
                },
            )

    return {"status": "ready", "service": SERVICE_NAME, "checks": checks}


@router.get("/metrics", response_class=PlainTextResponse)
def metrics():
    """Prometheus text exposition of agent metrics."""
    return get_metrics_response()
