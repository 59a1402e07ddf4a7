from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime
from typing import Dict, List, Optional
import time
import uuid
import logging
from contextlib import asynccontextmanager

from catalog.core.config import settings
from catalog.core.database import engine
from catalog.core.database import Base
from catalog.core.exceptions import CatalogError
from catalog.api import health, metrics, cities, destinations, destination_images
from catalog.api.metrics import metrics_collector
import catalog.models  # noqa: F401  registers tables on Base.metadata

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting City Catalog API")

    # Create database tables
    Base.metadata.create_all(bind=engine)

    yield

    # Shutdown
    logger.info("Shutting down City Catalog API")


# Create FastAPI app
app = FastAPI(
    title="City Catalog API",
    description="Catalog of cities and tourist destinations with filtering and proximity search",
    version="1.0.0",
    lifespan=lifespan
)


# Security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    return response


# Logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing and feed the metrics collector."""
    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path}",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "client_ip": request.client.host if request.client else "unknown"
        }
    )

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    # One shared label for every unmatched path
    route = request.scope.get("route")
    route_path = route.path if route is not None else "unmatched"
    metrics_collector.record_request(f"{request.method} {route_path}", response.status_code, duration_ms)

    logger.info(
        f"Request completed: {request.method} {request.url.path} -> {response.status_code}",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "duration_ms": round(duration_ms, 2)
        }
    )

    return response


# Request ID middleware (registered last so it runs first)
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID for tracing."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def install_host_filter(application: FastAPI, allowed_hosts: List[str]):
    """Reject requests whose Host header is not listed. A lone "*" disables the filter."""
    if allowed_hosts and allowed_hosts != ["*"]:
        application.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)


install_host_filter(app, settings.allowed_hosts)


def error_body(
    request: Request,
    message: str,
    error: str,
    errors: Optional[Dict[str, str]] = None
) -> dict:
    """Failure envelope shared by every exception handler."""
    body = {
        "success": False,
        "message": message,
        "error": error,
        "timestamp": datetime.now().isoformat(),
        "request_id": getattr(request.state, "request_id", "unknown")
    }
    if errors:
        body["errors"] = errors
    return body


# Exception handlers
@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{type(exc).__name__}: {exc.message} {exc.errors or ''}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.message, exc.error, exc.errors)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report every invalid field at once as field -> message."""
    errors = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        errors.setdefault(field, error.get("msg", "Invalid value"))

    logger.warning(f"Validation failed: {errors}")

    return JSONResponse(
        status_code=400,
        content=error_body(request, "Validation failed", "Invalid input data", errors)
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with consistent format."""
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, str(exc.detail), "HTTP error")
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "exception_type": type(exc).__name__
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content=error_body(request, "An unexpected error occurred", "Internal server error")
    )


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(metrics.router, tags=["metrics"])
app.include_router(cities.router)
app.include_router(destinations.router)
app.include_router(destination_images.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "City Catalog API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True if settings.environment == "development" else False,
        log_level="info"
    )
