"""TCG Trends FastAPI Application."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api.config import get_settings
from api.routers import filters, products
from config.logging_config import get_logger, setup_logging

settings = get_settings()
setup_logging(log_level="DEBUG" if settings.debug else "INFO")
logger = get_logger("api")

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="API for browsing trading-card products and their daily price changes",
)


class CacheHeaderMiddleware(BaseHTTPMiddleware):
    """Middleware to add Cache-Control headers to responses."""

    # Endpoints that can be cached
    CACHEABLE_PATHS = {
        "/api/filters/options": 3600,  # 1 hour
        "/api/daily-products": 60,  # 1 minute
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Only cache successful GET requests
        if request.method != "GET" or response.status_code != 200 or settings.debug:
            response.headers["Cache-Control"] = "no-cache"
            return response

        # Check if this path should be cached
        path = request.url.path
        for cacheable_path, max_age in self.CACHEABLE_PATHS.items():
            if path.startswith(cacheable_path):
                response.headers["Cache-Control"] = f"public, max-age={max_age}"
                break
        else:
            # Default: no cache for other endpoints
            response.headers["Cache-Control"] = "no-cache"

        return response


# Add cache header middleware
app.add_middleware(CacheHeaderMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(products.router, prefix="/api", tags=["Products"])
app.include_router(filters.router, prefix="/api/filters", tags=["Filters"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
        "endpoints": {
            "products": "/api/daily-products",
            "filter_options": "/api/filters/options",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    from api.services.database import get_store

    try:
        count = get_store().count_products()
        return {
            "status": "healthy",
            "database": "connected",
            "total_products": count,
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
        }
