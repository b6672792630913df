"""
Affine Correction
Origin offset and per-axis scale applied to already projected coordinates,
e.g. to move world coordinates into a display-aligned frame.

Both directions update the caller's records in place and return the same
list, so hot rendering paths do not allocate.
"""
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Sequence, Union


@dataclass(frozen=True)
class AffineConfig:
    """Origin (2D) and scale (3D); scale defaults to 1 on every axis"""
    origin_x: float = 0.0
    origin_y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    scale_z: float = 1.0

    def __post_init__(self):
        # Rejected up front so the inverse never divides by zero midway through a batch
        for axis, value in (("x", self.scale_x), ("y", self.scale_y), ("z", self.scale_z)):
            if value == 0:
                raise ValueError(f"Affine scale on {axis} must be non-zero")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "AffineConfig":
        """Build from {"origin": {"x", "y"}, "scale": {"x", "y", "z"}}"""
        origin = config.get("origin")
        if origin is None:
            raise ValueError("Affine configuration requires an origin")
        scale = config.get("scale") or {}
        return cls(
            origin_x=float(origin.get("x", 0.0)),
            origin_y=float(origin.get("y", 0.0)),
            scale_x=float(scale.get("x", 1.0)),
            scale_y=float(scale.get("y", 1.0)),
            scale_z=float(scale.get("z", 1.0)),
        )


AffineConfigLike = Union[AffineConfig, Mapping[str, Any]]


def _as_config(config: AffineConfigLike) -> AffineConfig:
    if isinstance(config, AffineConfig):
        return config
    return AffineConfig.from_dict(config)


def affine_forward(config: AffineConfigLike, coordinates: Sequence[MutableMapping[str, Any]]):
    """
    Apply x' = (x - origin.x) * scale.x, y' = (y - origin.y) * scale.y, z' = z * scale.z.

    Records without a z value are left without one.
    """
    affine = _as_config(config)
    for point in coordinates:
        point["x"] = (point["x"] - affine.origin_x) * affine.scale_x
        point["y"] = (point["y"] - affine.origin_y) * affine.scale_y
        if point.get("z") is not None:
            point["z"] = point["z"] * affine.scale_z
    return coordinates


def affine_inverse(config: AffineConfigLike, coordinates: Sequence[MutableMapping[str, Any]]):
    """Exact inverse of `affine_forward`: x = x'/scale.x + origin.x, etc."""
    affine = _as_config(config)
    for point in coordinates:
        point["x"] = point["x"] / affine.scale_x + affine.origin_x
        point["y"] = point["y"] / affine.scale_y + affine.origin_y
        if point.get("z") is not None:
            point["z"] = point["z"] / affine.scale_z
    return coordinates
