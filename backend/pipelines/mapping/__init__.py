"""
Mapping Pipeline Module
Geographic mapping functionality: coordinate reference system transforms and projections
"""
from .projection import ProjectionContext

__all__ = ["ProjectionContext"]
