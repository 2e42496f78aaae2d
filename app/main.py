from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
import httpx
from app.api import quotes
from app.core.config import settings
from app.core.enums import FailureKind
from app.core.exceptions import MalformedRequest, QuoteError
from app.core.logging_setup import setup_logging
from app.core.redis import init_redis, close_redis, get_redis
from app.core.metrics import request_count, request_duration, redis_connected, get_metrics_text
import time
import logging

logger = logging.getLogger(__name__)

# classification is logged, callers only see these
ERROR_RESPONSES = {
    FailureKind.MALFORMED_REQUEST: (400, "malformed_request", "Invalid journey"),
    FailureKind.NO_ROUTE_FOUND: (422, "no_route_found", "No route found for this journey"),
    FailureKind.PRICING_FAILED: (500, "quote_failed", "Quote could not be produced"),
}
UPSTREAM_FAILURE = (502, "upstream_failure", "Quote could not be produced")


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
    setup_logging(settings.LOG_LEVEL)
    logger.info("Application starting...")

    app.state.http_client = httpx.AsyncClient()

    if settings.REDIS_URL:
        logger.info("Initializing Redis connection...")
        try:
            await init_redis(settings.REDIS_URL)
            redis_connected.set(1)
            logger.info("Redis connected")
        except Exception as e:
            logger.error(f"Redis connection failed, route cache disabled: {e}")
            redis_connected.set(0)
    else:
        logger.info("REDIS_URL not set, route cache disabled")
        redis_connected.set(0)

    yield

    logger.info("Application shutting down...")
    await app.state.http_client.aclose()
    await close_redis()
    redis_connected.set(0)
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)


@app.exception_handler(QuoteError)
async def quote_error_handler(request: Request, exc: QuoteError):
    status_code, error, detail = ERROR_RESPONSES.get(exc.kind, UPSTREAM_FAILURE)
    logger.error(f"Quote failed [{exc.kind}]: {exc.message} {exc.details or ''}".rstrip())
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return await quote_error_handler(request, MalformedRequest("Journey failed to parse", {"errors": exc.errors()}))


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    redis = get_redis()

    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if redis is not None else "disconnected",
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check():
    if settings.REDIS_URL and get_redis() is None:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Redis not available"}
        )

    return {
        "ready": True,
        "service": settings.API_TITLE
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
