"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes (users)
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.base import UserStore
from app.db.store import init_store, close_store, get_optional_user_store
from app.api import users

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

SLOW_REQUEST_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting user directory API...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        store = await init_store()
        logger.info(f"✅ {store.backend_name} store opened")

        is_healthy = await store.check_health()
        if not is_healthy:
            logger.warning("⚠️ Storage health check failed during startup")
        else:
            logger.info("✅ Storage health check passed")

        logger.info("🎉 User directory API started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Allowed origins: {settings.allowed_origins}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down user directory API...")

    try:
        await close_store()
        logger.info("✅ User store closed")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="User Directory API",
    description="CRUD API for user records (name, age, city)",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > SLOW_REQUEST_SECONDS:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(users.router, tags=["Users"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "User Directory API",
        "version": "1.0.0",
        "description": "CRUD API for user records",
        "status": "running",
        "environment": settings.ENVIRONMENT,
        "storage": settings.STORAGE_BACKEND
    }


async def _storage_healthy(store: Optional[UserStore]) -> bool:
    if store is None:
        logger.error("User store not initialized")
        return False
    return await store.check_health()


@app.get("/health", tags=["Health"])
async def health_check(store: Optional[UserStore] = Depends(get_optional_user_store)):
    """
    Health check endpoint.
    Checks storage connectivity.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {}
    }

    storage_healthy = await _storage_healthy(store)
    health_status["checks"]["storage"] = "healthy" if storage_healthy else "unhealthy"
    if not storage_healthy:
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check(store: Optional[UserStore] = Depends(get_optional_user_store)):
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if await _storage_healthy(store):
        return {"status": "ready"}

    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "storage_unavailable"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
