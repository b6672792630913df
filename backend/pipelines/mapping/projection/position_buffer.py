"""
Position Buffer
Packs feature positions into one flat [x, y, z, ...] array and projects it in
a single call. A single flat array transforms faster than a list of records.
"""
import logging
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from .engine import ProjectionContext

logger = logging.getLogger(__name__)

PositionAccessor = Callable[[Any, int], Mapping[str, float]]


def build_position_buffer(
    context: ProjectionContext,
    data: Sequence[Any],
    position: PositionAccessor,
    source: str,
    target: str,
) -> np.ndarray:
    """
    Build a projected position buffer for a set of data items.

    Args:
        context: Projection context used for the transform
        data: Feature data items
        position: Accessor returning {"x", "y", "z"?} for (item, index)
        source: CRS of the positions returned by the accessor
        target: CRS of the output buffer

    Returns:
        np.ndarray: float64 array of length 3 * len(data). Missing z values
        are written as 0 and stay 0 after projection.
    """
    buffer = np.empty(len(data) * 3, dtype=np.float64)
    for i, item in enumerate(data):
        point = position(item, i)
        buffer[3 * i] = point["x"]
        buffer[3 * i + 1] = point["y"]
        buffer[3 * i + 2] = point.get("z") or 0.0

    logger.debug(f"📦 Position buffer: {len(data)} points {source} → {target}")
    return context.transform_coordinates(source, target, buffer, 3)
