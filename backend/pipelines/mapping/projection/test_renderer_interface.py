from __future__ import annotations

import pytest

from . import ProjectionContext, RendererBackend, affine_forward, affine_inverse


class PartialRenderer(RendererBackend):
    def api(self) -> str:
        return "partial"


class FlatRenderer(RendererBackend):
    """Web mercator world, display = world shifted to a view origin and scaled per pixel"""

    def __init__(self, context: ProjectionContext):
        self.transform = context.get_transform("EPSG:4326", "EPSG:3857")
        self.view = {"origin": {"x": 0, "y": 0}, "scale": {"x": 0.001, "y": -0.001, "z": 1}}
        self.frames = 0

    def api(self) -> str:
        return "flat"

    def world_to_gcs(self, points):
        return self.transform.inverse(points)

    def display_to_gcs(self, points):
        return self.world_to_gcs(self.display_to_world(points))

    def gcs_to_display(self, points):
        return self.world_to_display(self.transform.forward(points))

    def world_to_display(self, points):
        return affine_forward(self.view, points)

    def display_to_world(self, points):
        return affine_inverse(self.view, points)

    def init(self) -> None:
        self.frames = 0

    def resize(self, width: int, height: int) -> None:
        self.view["origin"] = {"x": -width * 500, "y": height * 500}

    def render(self):
        self.frames += 1
        return self.frames

    def exit(self) -> None:
        pass


def test_incomplete_backend_fails_at_construction() -> None:
    with pytest.raises(TypeError):
        PartialRenderer()


def test_base_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        RendererBackend()


def test_complete_backend_round_trips_display_points() -> None:
    renderer = FlatRenderer(ProjectionContext(cache_size=2))
    renderer.init()
    renderer.resize(800, 600)

    display = renderer.gcs_to_display([{"x": 12.5, "y": 41.9}])
    gcs = renderer.display_to_gcs(display)

    assert renderer.api() == "flat"
    assert renderer.render() == 1
    assert gcs[0]["x"] == pytest.approx(12.5, abs=1e-6)
    assert gcs[0]["y"] == pytest.approx(41.9, abs=1e-6)
