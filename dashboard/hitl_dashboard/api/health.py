# hitl_dashboard/api/health.py

from fastapi import APIRouter, Depends

from hitl_dashboard.client.api import BackendClient, get_backend_client
from hitl_dashboard.core.config import settings
from hitl_dashboard.core.errors import ClassifiedError
from hitl_dashboard.core.lifecycle import RequestLifecycleController

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "ok"}


@router.get("/health/backend")
async def backend_health_check(client: BackendClient = Depends(get_backend_client)):
    """Health check including backend reachability (may take a while on cold start)"""

    health = {
        "status": "ok",
        "backend": {"url": settings.API_BASE_URL},
    }

    controller = RequestLifecycleController()
    try:
        await controller.run(client.workflows.get_all)
        health["backend"]["status"] = "connected"
    except ClassifiedError as e:
        health["backend"]["status"] = f"error: {e.message}"
        health["backend"]["kind"] = e.kind.value
        health["status"] = "degraded"

    attempt = controller.attempt
    health["backend"]["elapsed_ms"] = round(attempt.elapsed_ms or 0)
    health["backend"]["slow"] = attempt.warning_fired

    return health
