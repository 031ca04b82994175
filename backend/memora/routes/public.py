# /memora/routes/public.py

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest
from datetime import datetime, timezone

from memora.config import strings
from memora.config.settings import settings
from memora.utils.dependencies import verify_metrics_access
from memora.services.history_service import history_service

# Public endpoints that need no conversation: root, health checks and the
# Prometheus metrics (protected by an API key when one is configured).

router = APIRouter()

@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": f"{strings.ASSISTANT_NAME} Assistant",
        "version": "1.0.0",
        "status": "operational",
        "environment": settings.environment
    }

@router.get("/health", summary="Basic Health Check")
async def health_check():
    """Basic health check for load balancers."""
    history = history_service.last_error_kind.value if history_service.last_error_kind else "ok"
    return {"status": "healthy", "history": history, "timestamp": datetime.now(timezone.utc)}

@router.get("/health/ready", summary="Readiness Check")
async def readiness_check():
    """Readiness check: the history store must answer a ping."""
    if not await history_service.ping():
        raise HTTPException(status_code=503, detail="Service not ready: history store unreachable")
    return {"status": "ready"}

@router.get("/metrics", tags=["Monitoring"])
async def metrics(request: Request, _: bool = Depends(verify_metrics_access)):
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type="text/plain")
