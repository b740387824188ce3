import time
import logging
import fastapi
import fastapi.middleware.cors
import starlette.middleware.base
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import library_service.config

logger = logging.getLogger(__name__)

settings = library_service.config.settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.rate_limit_enabled
)


def get_default_limit() -> str:
    return f"{settings.rate_limit_per_minute}/minute"


class RequestLoggingMiddleware(starlette.middleware.base.BaseHTTPMiddleware):
    async def dispatch(self, request: fastapi.Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"{request.method} {request.url.path} "
            f"-> {response.status_code} in {process_time:.3f}s"
        )

        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response


def setup_middleware(app: fastapi.FastAPI) -> None:
    if settings.env == "development":
        app.add_middleware(
            fastapi.middleware.cors.CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods.split(","),
            allow_headers=settings.cors_allow_headers.split(","),
        )

    app.add_middleware(RequestLoggingMiddleware)

    if settings.rate_limit_enabled:
        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
