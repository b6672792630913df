from __future__ import annotations

import numpy as np
import pytest

from . import ProjectionContext, build_position_buffer


def _position(item, index):
    return item["position"]


@pytest.fixture
def context() -> ProjectionContext:
    return ProjectionContext(cache_size=4)


def test_buffer_layout_for_identity(context: ProjectionContext) -> None:
    data = [{"position": {"x": 1, "y": 2}}, {"position": {"x": 3, "y": 4, "z": 5}}]
    buffer = build_position_buffer(context, data, _position, "EPSG:4326", "EPSG:4326")
    assert isinstance(buffer, np.ndarray)
    np.testing.assert_array_equal(buffer, [1, 2, 0, 3, 4, 5])


def test_projected_buffer_keeps_flat_elevation(context: ProjectionContext) -> None:
    data = [{"position": {"x": 90, "y": 45}}, {"position": {"x": -90, "y": -45, "z": 0}}]
    buffer = build_position_buffer(context, data, _position, "EPSG:4326", "EPSG:3857")

    assert buffer.shape == (6,)
    assert buffer[0] == pytest.approx(10018754, abs=10)
    assert buffer[4] == pytest.approx(-5621521, abs=10)
    assert buffer[2] == 0
    assert buffer[5] == 0


def test_projected_buffer_carries_elevation(context: ProjectionContext) -> None:
    data = [{"position": {"x": 0, "y": 0, "z": 100}}]
    buffer = build_position_buffer(context, data, _position, "EPSG:4326", "EPSG:3857")
    assert buffer[2] == pytest.approx(100)


def test_empty_data(context: ProjectionContext) -> None:
    buffer = build_position_buffer(context, [], _position, "EPSG:4326", "EPSG:3857")
    assert buffer.shape == (0,)
