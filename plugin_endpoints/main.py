"""
FastAPI main application entry point for the plugin endpoints
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pathlib import Path
import asyncio

from plugin_endpoints import __version__
from plugin_endpoints.config import settings
from plugin_endpoints.core.utils import PluginAPIError
from plugin_endpoints.logger import logger
from plugin_endpoints.api import plugins


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    logger.info("Starting up plugin endpoints...")

    Path(settings.PACKAGE_TMP_DIR).mkdir(parents=True, exist_ok=True)
    if not Path(settings.PLUGINS_DIR).is_dir():
        logger.warning(f"Plugins directory {settings.PLUGINS_DIR} does not exist; listings will be empty")

    yield

    logger.info("Shutting down plugin endpoints...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=__version__,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-WP-Total", "X-WP-TotalPages", "Link"],
    )


@app.get("/health")
async def health_check():
    """
    Health check endpoint. The update cache is optional, so an unreachable
    Redis is reported but does not make the service unhealthy.
    """
    from plugin_endpoints.core.redis_client import RedisClient
    from redis.exceptions import RedisError

    health_status = {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "checks": {}
    }

    health_status["checks"]["plugins_dir"] = "healthy" if Path(settings.PLUGINS_DIR).is_dir() else "missing"

    try:
        await asyncio.wait_for(RedisClient.ping(), timeout=2.0)
        health_status["checks"]["update_cache"] = "healthy"
    except (RedisError, OSError, asyncio.TimeoutError):
        health_status["checks"]["update_cache"] = "unavailable"

    return health_status


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": __version__,
        "namespace": settings.API_PREFIX,
        "docs": "/docs",
        "health": "/health"
    }


app.include_router(plugins.router, prefix=settings.API_PREFIX)


@app.exception_handler(PluginAPIError)
async def plugin_api_error_handler(request: Request, exc: PluginAPIError):
    """Render domain errors as {code, message, data: {status}}"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to catch and log all unhandled exceptions
    """
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "code": "internal_server_error",
            "message": "Internal server error",
            "data": {"status": 500}
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "plugin_endpoints.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
