"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from .config import settings
from .core.dependencies import get_storage_service
from .middleware.rate_limit import limiter, rate_limit_exceeded_handler
from .routers import uploads
from .services.storage_service import StorageService
from .utils.exceptions import FileSizeExceeded, InvalidArgument, StorageError
from .utils.logger import configure_logging, get_logger

# Configure logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting application",
        version=settings.app_version,
        bucket=settings.bucket,
        endpoint=settings.endpoint,
        signed_url_headroom_seconds=settings.signed_url_headroom_seconds,
    )
    yield
    logger.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Object storage upload manager: bounded streaming uploads, multipart uploads and signed URLs",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# Exception handlers
@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    """Map upload manager errors to HTTP responses."""
    if isinstance(exc, FileSizeExceeded):
        status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    elif isinstance(exc, InvalidArgument):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
        logger.error("Storage error", error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_code": type(exc).__name__},
    )


# Health check endpoint
@app.get("/health")
async def health_check(service: StorageService = Depends(get_storage_service)):
    """Health check endpoint."""
    storage_ok = await service.check_connectivity()
    return {
        "status": "healthy" if storage_ok else "degraded",
        "storage": storage_ok,
        "version": settings.app_version,
    }


# Include routers
app.include_router(uploads.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "upload_manager.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
