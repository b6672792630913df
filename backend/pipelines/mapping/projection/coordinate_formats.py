"""
Coordinate Format Normalizer
Detects the shape of caller-supplied coordinates and converts between that
shape and the column arrays the projection math works on.

Accepted shapes:
    {"x": 1, "y": 2, "z": 3}              single record
    [{"x": 1, "y": 2}, ...]               sequence of records
    [1, 2, 3, 4] (+ component count)      flat numeric sequence
    [[1, 2], [3, 4, 5], ...]              sequence of numeric sequences
"""
import logging
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

import numpy as np

from .exceptions import InvalidCoordinatesError

logger = logging.getLogger(__name__)

NOT_VALID_MESSAGE = "Coordinates are not valid"
INVALID_MESSAGE = "Invalid coordinates"
COMPONENTS_PER_ELEMENT_MESSAGE = "Invalid coordinates. Requires two or three components per element"
COMPONENT_COUNT_MESSAGE = "Number of components should be two or three"

VALID_COMPONENT_COUNTS = (2, 3)
DEFAULT_COMPONENT_COUNT = 2


class CoordinateShape(Enum):
    """Structural form of a coordinate batch"""
    SCALAR_RECORD = "scalar_record"
    RECORD_SEQUENCE = "record_sequence"
    FLAT_NUMERIC = "flat_numeric"
    NESTED_NUMERIC = "nested_numeric"


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    Everything needed to rebuild the caller's shape from column arrays.

    Attributes:
        kind: Which of the four accepted shapes the input had
        component_count: Values per point for FLAT_NUMERIC
        element_components: Per-element length for NESTED_NUMERIC
        z_present: Per-point flag, True where the input carried a z value
        flat_elevation: True when every input z was absent or zero
        as_ndarray: Input was a numpy array and output should be one too
    """
    kind: CoordinateShape
    component_count: Optional[int] = None
    element_components: Tuple[int, ...] = ()
    z_present: Tuple[bool, ...] = ()
    flat_elevation: bool = True
    as_ndarray: bool = False


@dataclass
class NormalizedCoordinates:
    """Column arrays for a batch plus the descriptor of its original shape"""
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    shape: ShapeDescriptor
    original: Any

    def __len__(self) -> int:
        return int(self.x.shape[0])


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return True
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_numeric_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim == 1 and np.issubdtype(value.dtype, np.number)
    return _is_sequence(value) and all(_is_number(v) for v in value)


def _as_float(value: Any) -> float:
    # Numeric strings are malformed input, not something to coerce
    if not _is_number(value):
        raise InvalidCoordinatesError(INVALID_MESSAGE)
    return float(value)


def _columns(points: List[Tuple[float, float, float]]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    if not points:
        empty = np.empty(0, dtype=np.float64)
        return empty, empty.copy(), empty.copy()
    array = np.asarray(points, dtype=np.float64)
    return array[:, 0].copy(), array[:, 1].copy(), array[:, 2].copy()


def _normalize_records(records: Sequence, kind: CoordinateShape, original: Any) -> NormalizedCoordinates:
    points = []
    z_present = []
    for record in records:
        if "x" not in record or "y" not in record:
            raise InvalidCoordinatesError(INVALID_MESSAGE)
        z = record.get("z")
        has_z = z is not None
        points.append((
            _as_float(record["x"]),
            _as_float(record["y"]),
            _as_float(z) if has_z else 0.0,
        ))
        z_present.append(has_z)

    x, y, z = _columns(points)
    shape = ShapeDescriptor(
        kind=kind,
        z_present=tuple(z_present),
        flat_elevation=not np.any(z),
    )
    return NormalizedCoordinates(x=x, y=y, z=z, shape=shape, original=original)


def _normalize_nested(elements: Sequence, original: Any, as_ndarray: bool) -> NormalizedCoordinates:
    points = []
    element_components = []
    for element in elements:
        count = len(element)
        if count not in VALID_COMPONENT_COUNTS:
            raise InvalidCoordinatesError(COMPONENTS_PER_ELEMENT_MESSAGE)
        points.append((
            float(element[0]),
            float(element[1]),
            float(element[2]) if count == 3 else 0.0,
        ))
        element_components.append(count)

    x, y, z = _columns(points)
    shape = ShapeDescriptor(
        kind=CoordinateShape.NESTED_NUMERIC,
        element_components=tuple(element_components),
        z_present=tuple(count == 3 for count in element_components),
        flat_elevation=not np.any(z),
        as_ndarray=as_ndarray,
    )
    return NormalizedCoordinates(x=x, y=y, z=z, shape=shape, original=original)


def _resolve_component_count(length: int, num_components: Optional[int]) -> int:
    if num_components is not None:
        if num_components not in VALID_COMPONENT_COUNTS:
            raise InvalidCoordinatesError(COMPONENT_COUNT_MESSAGE)
        return int(num_components)
    if length in VALID_COMPONENT_COUNTS:
        return length
    return DEFAULT_COMPONENT_COUNT


def _normalize_flat(values: Any, num_components: Optional[int], original: Any, as_ndarray: bool) -> NormalizedCoordinates:
    array = np.asarray(values, dtype=np.float64)
    count = _resolve_component_count(array.shape[0], num_components)
    if array.shape[0] % count:
        raise InvalidCoordinatesError(INVALID_MESSAGE)

    grouped = array.reshape(-1, count)
    x = grouped[:, 0].copy()
    y = grouped[:, 1].copy()
    z = grouped[:, 2].copy() if count == 3 else np.zeros(grouped.shape[0], dtype=np.float64)
    shape = ShapeDescriptor(
        kind=CoordinateShape.FLAT_NUMERIC,
        component_count=count,
        z_present=(count == 3,) * grouped.shape[0],
        flat_elevation=not np.any(z),
        as_ndarray=as_ndarray,
    )
    return NormalizedCoordinates(x=x, y=y, z=z, shape=shape, original=original)


def normalize(coordinates: Any, num_components: Optional[int] = None) -> NormalizedCoordinates:
    """
    Detect the shape of a coordinate batch and split it into column arrays.

    Args:
        coordinates: A record, a sequence of records, a flat numeric sequence
            or a sequence of numeric sequences
        num_components: Values per point for flat numeric input (2 or 3)

    Returns:
        NormalizedCoordinates: x, y, z float64 arrays and the shape descriptor

    Raises:
        InvalidCoordinatesError: The batch does not match any accepted shape
    """
    if coordinates is None:
        raise InvalidCoordinatesError(NOT_VALID_MESSAGE)

    if _is_record(coordinates):
        return _normalize_records([coordinates], CoordinateShape.SCALAR_RECORD, coordinates)

    if isinstance(coordinates, np.ndarray):
        if not np.issubdtype(coordinates.dtype, np.number):
            raise InvalidCoordinatesError(INVALID_MESSAGE)
        if coordinates.ndim == 1:
            return _normalize_flat(coordinates, num_components, coordinates, as_ndarray=True)
        if coordinates.ndim == 2:
            return _normalize_nested(coordinates, coordinates, as_ndarray=True)
        raise InvalidCoordinatesError(INVALID_MESSAGE)

    if not _is_sequence(coordinates):
        raise InvalidCoordinatesError(NOT_VALID_MESSAGE)

    if all(_is_record(element) for element in coordinates):
        return _normalize_records(coordinates, CoordinateShape.RECORD_SEQUENCE, coordinates)
    if all(_is_numeric_sequence(element) for element in coordinates):
        return _normalize_nested(coordinates, coordinates, as_ndarray=False)
    if all(_is_number(element) for element in coordinates):
        return _normalize_flat(coordinates, num_components, coordinates, as_ndarray=False)

    logger.debug(f"🧭 Rejected coordinate batch of {len(coordinates)} mixed elements")
    raise InvalidCoordinatesError(INVALID_MESSAGE)


def _output_record(record: Mapping, x: float, y: float, z: float, has_z: bool) -> dict:
    output = dict(record)
    output["x"] = float(x)
    output["y"] = float(y)
    if has_z:
        output["z"] = float(z)
    return output


def denormalize(normalized: NormalizedCoordinates, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> Any:
    """
    Rebuild transformed column arrays into the shape the caller supplied.

    Records are copied (extra keys included) rather than mutated; z is only
    written where the input carried one.
    """
    shape = normalized.shape
    kind = shape.kind

    if kind is CoordinateShape.SCALAR_RECORD:
        return _output_record(normalized.original, x[0], y[0], z[0], shape.z_present[0])

    if kind is CoordinateShape.RECORD_SEQUENCE:
        return [
            _output_record(record, x[i], y[i], z[i], shape.z_present[i])
            for i, record in enumerate(normalized.original)
        ]

    if kind is CoordinateShape.FLAT_NUMERIC:
        columns = [x, y, z] if shape.component_count == 3 else [x, y]
        flat = np.column_stack(columns).ravel() if len(x) else np.empty(0, dtype=np.float64)
        return flat if shape.as_ndarray else flat.tolist()

    if shape.as_ndarray:
        columns = [x, y, z] if shape.element_components and shape.element_components[0] == 3 else [x, y]
        return np.column_stack(columns)
    return [
        [float(x[i]), float(y[i]), float(z[i])] if count == 3 else [float(x[i]), float(y[i])]
        for i, count in enumerate(shape.element_components)
    ]
