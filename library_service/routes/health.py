import datetime
import logging
import fastapi
import library_service.database
import library_service.middleware.http
import library_service.models.responses

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/health", tags=["Health"])

limiter = library_service.middleware.http.limiter

SERVICE_NAME = "library"
SERVICE_VERSION = "1.0.0"


@router.get(
    "",
    response_model=library_service.models.responses.HealthResponse,
    summary="Basic health check",
    description="Returns basic health status of the library service"
)
@limiter.limit(library_service.middleware.http.get_default_limit())
async def health(request: fastapi.Request):
    return library_service.models.responses.HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.datetime.now().isoformat()
    )


@router.get(
    "/deep",
    response_model=library_service.models.responses.DeepHealthResponse,
    summary="Deep health check",
    description="Returns health status of the library service and its database"
)
@limiter.limit(library_service.middleware.http.get_default_limit())
async def deep_health(request: fastapi.Request):
    dependencies = {}

    try:
        await library_service.database.ping()
        dependencies["database"] = "healthy"
    except Exception as e:
        logger.warning(f"Database health check failed: {str(e)}")
        dependencies["database"] = "unhealthy"

    overall_status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "degraded"

    return library_service.models.responses.DeepHealthResponse(
        status=overall_status,
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.datetime.now().isoformat(),
        dependencies=dependencies
    )
