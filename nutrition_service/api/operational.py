"""
Operational endpoints for infrastructure and monitoring
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from nutrition_service.core.errors import ErrorResponse
from nutrition_service.core.logger import logger
from nutrition_service.dependencies.context import ServiceContext, get_context

router = APIRouter()


@router.get("/health")
async def health(context: ServiceContext = Depends(get_context)):
    """Liveness: the process is up and serving requests"""
    return {
        "status": "healthy",
        "service": context.config.service_name,
        "version": context.config.service_version,
    }


@router.get("/health/ready")
async def readiness(context: ServiceContext = Depends(get_context)):
    """Readiness: the product database answers a ping"""
    try:
        await context.product_service.ping()
    except ErrorResponse as e:
        logger.warning("Readiness check failed", error=e,
                       metadata={"event": "readiness_failed", "detail": getattr(e, "detail", None)})
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "checks": {"database": "unavailable"}},
        )
    return {"status": "ready", "checks": {"database": "ok"}}
