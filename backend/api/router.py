"""
Central API Router
Combines all API endpoints into a single router for main.py
"""
from fastapi import APIRouter
from api.endpoints import projection
from api import logs

# Create the main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(projection.router, prefix="/api", tags=["projection"])
api_router.include_router(logs.router, tags=["logs"])

# Add a root endpoint for API discovery
@api_router.get("/api")
async def api_root():
    """API root endpoint for discovery"""
    return {
        "message": "CRS Transform API v1.0",
        "documentation": "/docs",
        "endpoints": {
            "transform": "/api/crs/transform - Transform coordinates between reference systems",
            "affine": "/api/crs/affine - Apply an origin/scale correction to points",
            "definitions": "/api/crs/definitions - Register or read projection definitions",
            "lookup": "/api/crs/lookup - Resolve an EPSG code from the remote registry",
            "cache": "/api/crs/cache - Transform cache statistics",
            "logs": "/logs/recent - Recent log records"
        }
    }
