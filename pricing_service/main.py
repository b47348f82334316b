from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from pricing_service.api import quotes, promo_codes
from pricing_service.core.config import settings
from pricing_service.core.errors import ConfigurationError, ValidationError
from pricing_service.core.redis import init_redis, close_redis, get_redis
from pricing_service.core.metrics import request_count, request_duration, redis_connected, get_metrics_text
from pricing_service.services.rates import load_rate_table, set_rate_table
import time
import logging

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        
        try:
            response = await call_next(request)
            duration = time.time() - start_time
            
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()
            
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)
            
            return response
        except Exception:
            duration = time.time() - start_time
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")

    if settings.RATE_TABLE_PATH:
        logger.info(f"Loading rate table from {settings.RATE_TABLE_PATH}")
        set_rate_table(load_rate_table(settings.RATE_TABLE_PATH))
    
    logger.info("Initializing Redis connection...")
    try:
        redis = await init_redis()
        redis_connected.set(1 if redis is not None else 0)
        if redis is not None:
            logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed, quotes will not be cached: {e}")
        redis_connected.set(0)
    
    yield
    
    logger.info("Application shutting down...")
    await close_redis()
    redis_connected.set(0)
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)
app.include_router(promo_codes.router)


@app.exception_handler(ValidationError)
async def quote_validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected quote request: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": "validation_error"}
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Pricing configuration error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "error": "configuration_error"}
    )


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    redis = get_redis()
    redis_healthy = redis is not None
    
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if redis_healthy else "disconnected"
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check():
    # Redis only backs the quote cache, pricing works without it
    return {
        "ready": True,
        "service": settings.API_TITLE,
        "cache": "enabled" if get_redis() is not None else "disabled"
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
