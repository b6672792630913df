"""
Coordinate Transform
Reusable source → target projection built on pyproj, shape-preserving on both directions
"""
import logging
from typing import Any, Optional

import numpy as np
from pyproj import CRS, Transformer
from pyproj.enums import TransformDirection
from pyproj.exceptions import CRSError, ProjError

from .coordinate_formats import denormalize, normalize
from .exceptions import ProjectionError, TransformConstructionError

logger = logging.getLogger(__name__)


class CoordinateTransform:
    """
    Projection between two CRS identifiers.

    Built once per (source, target) pair and shared through the transform
    cache, so instances carry no mutable state after construction.
    Identifiers are kept as given; the definitions are what pyproj compiles.
    """

    def __init__(self, source: str, target: str, source_definition: str, target_definition: str):
        self._source = source
        self._target = target
        self._source_definition = source_definition
        self._target_definition = target_definition
        self._transformer: Optional[Transformer] = None

        if source == target:
            logger.debug(f"🧭 Identity transform for {source}")
            return

        try:
            self._transformer = Transformer.from_crs(
                CRS.from_user_input(source_definition),
                CRS.from_user_input(target_definition),
                always_xy=True,
            )
        except CRSError as e:
            logger.error(f"🧭 Cannot build transform {source} → {target}: {str(e)}")
            raise TransformConstructionError(
                f"Cannot build transform from {source} to {target}: {str(e)}"
            ) from e

        logger.debug(f"📍 Created transform {source} → {target}")

    @property
    def source(self) -> str:
        return self._source

    @property
    def target(self) -> str:
        return self._target

    @property
    def source_definition(self) -> str:
        return self._source_definition

    @property
    def target_definition(self) -> str:
        return self._target_definition

    @property
    def is_identity(self) -> bool:
        return self._transformer is None

    def forward(self, coordinates: Any, num_components: Optional[int] = None) -> Any:
        """
        Transform coordinates from source to target.

        Args:
            coordinates: Record, sequence of records, flat numeric sequence
                or sequence of numeric sequences
            num_components: Values per point for flat numeric input (2 or 3)

        Returns:
            Transformed coordinates in the same shape as the input. For an
            identity transform the input object itself is returned.
        """
        return self._apply(coordinates, num_components, TransformDirection.FORWARD)

    def inverse(self, coordinates: Any, num_components: Optional[int] = None) -> Any:
        """Transform coordinates from target back to source (see `forward`)"""
        return self._apply(coordinates, num_components, TransformDirection.INVERSE)

    def _apply(self, coordinates: Any, num_components: Optional[int], direction: TransformDirection) -> Any:
        if self._transformer is None:
            return coordinates

        normalized = normalize(coordinates, num_components)
        if not len(normalized):
            return denormalize(normalized, normalized.x, normalized.y, normalized.z)

        try:
            x, y, z = self._transformer.transform(
                normalized.x, normalized.y, normalized.z, direction=direction
            )
        except ProjError as e:
            logger.error(f"🧭 Projection error {self._source} → {self._target}: {str(e)}")
            raise ProjectionError(f"Projection failed from {self._source} to {self._target}: {str(e)}") from e

        # A 2D reprojection must not invent elevation for flat input
        if normalized.shape.flat_elevation:
            z = np.zeros_like(normalized.z)

        return denormalize(normalized, np.asarray(x), np.asarray(y), np.asarray(z))

    def __repr__(self) -> str:
        return f"CoordinateTransform(source={self._source!r}, target={self._target!r})"
