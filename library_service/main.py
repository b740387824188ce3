import logging
import sys
import signal
import contextlib
import fastapi
import fastapi.exceptions
import uvicorn
import library_service.clients.book_catalog
import library_service.config
import library_service.database
import library_service.middleware.http
import library_service.routes.health
import library_service.routes.library
import library_service.utils.responses

settings = library_service.config.settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.ERROR),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    logger.info("Starting Library service...")
    await library_service.database.init_db()
    await library_service.clients.book_catalog.book_catalog_client.connect()
    logger.info("Library service started successfully")

    yield

    logger.info("Shutting down Library service...")
    await library_service.clients.book_catalog.book_catalog_client.close()
    await library_service.database.close_db()
    logger.info("Library service shut down successfully")


app = fastapi.FastAPI(
    title="Library Service API",
    description="""
    ## Library Service

    Keeps each user's personal library: the books they want to read, are
    currently reading, or have read.

    ### Features

    - List your library, filtered by reading status
    - Add a book (validated against the book catalog)
    - Remove a book

    All library endpoints require a JWT in the `Authorization: Bearer <token>` header.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)


@app.exception_handler(fastapi.exceptions.RequestValidationError)
async def request_validation_handler(request: fastapi.Request, exc: fastapi.exceptions.RequestValidationError):
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    return library_service.utils.responses.error_response(
        "INVALID_ARGUMENT",
        "Invalid parameters.",
        details={"fields": fields},
        status_code=400
    )


library_service.middleware.http.setup_middleware(app)

app.include_router(library_service.routes.health.router)
app.include_router(library_service.routes.library.router)


def handle_shutdown(signum, frame):
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    sys.exit(0)


if __name__ == "__main__":
    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)

    uvicorn.run(
        "library_service.main:app",
        host=settings.library_service_host,
        port=settings.library_http_port,
        workers=settings.library_workers,
        log_level=settings.log_level.lower(),
        access_log=True
    )
