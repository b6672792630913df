"""
Projection Module
Handles coordinate reference system transforms and affine corrections
"""
from .affine import AffineConfig, affine_forward, affine_inverse
from .coordinate_formats import CoordinateShape, normalize, denormalize
from .definition_resolver import DefinitionResolver
from .definitions import DefinitionRegistry
from .engine import ProjectionContext
from .position_buffer import build_position_buffer
from .renderer_interface import RendererBackend
from .transform_cache import TransformCache
from .transformer import CoordinateTransform

__all__ = [
    "AffineConfig",
    "affine_forward",
    "affine_inverse",
    "CoordinateShape",
    "normalize",
    "denormalize",
    "DefinitionResolver",
    "DefinitionRegistry",
    "ProjectionContext",
    "build_position_buffer",
    "RendererBackend",
    "TransformCache",
    "CoordinateTransform",
]
