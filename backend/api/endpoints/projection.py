"""
Projection API Endpoints
Coordinate transforms, affine corrections and projection definition management
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from pipelines.mapping.projection import ProjectionContext, affine_forward, affine_inverse
from pipelines.mapping.projection.exceptions import (
    DefinitionLookupError,
    DefinitionNotFoundError,
    InvalidCoordinatesError,
    ProjectionError,
    TransformConstructionError,
    UnsupportedSchemeError,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/crs")


class TransformRequest(BaseModel):
    source: str
    target: str
    coordinates: Any = None
    num_components: Optional[int] = None
    direction: str = "forward"


class AffineRequest(BaseModel):
    config: Dict[str, Any]
    coordinates: list
    inverse: bool = False


class DefinitionRequest(BaseModel):
    key: str
    definition: str


class LookupRequest(BaseModel):
    code: str


def get_projection_context(request: Request) -> ProjectionContext:
    """Projection context created at application startup"""
    return request.app.state.projection_context


@router.post("/transform")
async def transform_coordinates(
    body: TransformRequest,
    context: ProjectionContext = Depends(get_projection_context),
) -> Dict[str, Any]:
    """
    Transform a coordinate batch between two CRS identifiers

    Unregistered EPSG codes are looked up remotely before the transform is built.
    The response carries coordinates in the same shape as the request.
    """
    if body.direction not in ("forward", "inverse"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown direction: {body.direction}"
        )

    try:
        transform = await context.get_transform_async(body.source, body.target)
        if body.direction == "forward":
            result = transform.forward(body.coordinates, body.num_components)
        else:
            result = transform.inverse(body.coordinates, body.num_components)
    except InvalidCoordinatesError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (TransformConstructionError, UnsupportedSchemeError) as e:
        logger.warning(f"⚠️ Transform {body.source} → {body.target} rejected: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DefinitionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DefinitionLookupError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except ProjectionError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return {
        "success": True,
        "source": body.source,
        "target": body.target,
        "direction": body.direction,
        "coordinates": result
    }


@router.post("/affine")
async def apply_affine(body: AffineRequest) -> Dict[str, Any]:
    """Apply an origin/scale correction (or its inverse) to a list of points"""
    try:
        if body.inverse:
            result = affine_inverse(body.config, body.coordinates)
        else:
            result = affine_forward(body.config, body.coordinates)
    except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid affine request: {str(e)}"
        )

    return {"success": True, "coordinates": result}


@router.get("/definitions/{key:path}")
async def get_definition(
    key: str,
    context: ProjectionContext = Depends(get_projection_context),
) -> Dict[str, Any]:
    definition = context.registry.get(key)
    if definition is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown projection: {key}")
    return {"key": key, "definition": definition}


@router.post("/definitions")
async def define_projection(
    body: DefinitionRequest,
    context: ProjectionContext = Depends(get_projection_context),
) -> Dict[str, Any]:
    context.define(body.key, body.definition)
    logger.info(f"📚 Projection {body.key} registered via API")
    return {"success": True, "key": body.key}


@router.post("/lookup")
async def lookup_definition(
    body: LookupRequest,
    context: ProjectionContext = Depends(get_projection_context),
) -> Dict[str, Any]:
    """Resolve an authority code through the remote definition service"""
    try:
        definition = await context.lookup(body.code)
    except UnsupportedSchemeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DefinitionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DefinitionLookupError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return {"success": True, "key": body.code, "definition": definition}


@router.get("/cache")
async def get_cache_stats(context: ProjectionContext = Depends(get_projection_context)) -> Dict[str, Any]:
    return context.cache_stats()
