"""
Product Search API

FastAPI application: search route, health checks, Prometheus metrics, CORS.
"""
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from config import get_settings
from exceptions import ProductSearchError, UpstreamTransportError
from observability import get_logger, metrics_registry
from observability.health import check_search_backend
from observability.middleware import ObservabilityMiddleware
from routes.search import router as search_router

logger = get_logger(__name__)

VERSION = "0.1.0"

settings = get_settings()

app = FastAPI(
    title="Product Search API",
    description="Normalized product listings from shopping search upstreams",
    version=VERSION,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(search_router)


class HealthResponse(BaseModel):
    status: str
    version: str


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {
        "status": "healthy",
        "version": VERSION,
    }


@app.get("/health/ready")
async def readiness_check():
    """
    Readiness check - verifies the search backend is usable.

    Returns 503 if it is not.
    """
    result = check_search_backend(get_settings())
    return JSONResponse(
        status_code=200 if result.is_healthy else 503,
        content={
            "status": "ready" if result.is_healthy else "degraded",
            "checks": {result.name: result.to_dict()},
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(content=generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(UpstreamTransportError)
async def upstream_error_handler(request: Request, exc: UpstreamTransportError):
    logger.error(
        f"Search Error: {exc.message}",
        extra={"path": request.url.path, "detail": exc.detail},
    )
    return JSONResponse(status_code=500, content=exc.to_response())


@app.exception_handler(ProductSearchError)
async def product_search_error_handler(request: Request, exc: ProductSearchError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", extra={"path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.on_event("startup")
async def startup_event():
    logger.info(
        f"Product Search API running on port {settings.port}",
        extra={"backend": settings.search_backend, "demo_fallback": settings.demo_fallback_enabled},
    )
    logger.info(f"Try: http://localhost:{settings.port}/search?q=laptop")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
