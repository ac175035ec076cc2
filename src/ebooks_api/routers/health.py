import logging

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of API, storage, and database components.
    """
    health_status = {
        "status": "ok",
        "components": {
            "api": "ready",
            "storage": "initializing",
            "database": "initializing"
        },
        "ready": False
    }

    # Check storage status
    try:
        request.app.state.storage.object_exists("health-check")
        health_status["components"]["storage"] = "ready"
    except Exception as e:
        logger.warning(f"Storage health check failed: {str(e)}")
        health_status["components"]["storage"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    # Check database status
    try:
        request.app.state.store.list_ready("health-check")
        health_status["components"]["database"] = "ready"
    except Exception as e:
        logger.warning(f"Database health check failed: {str(e)}")
        health_status["components"]["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )

    return health_status
