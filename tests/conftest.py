"""Shared pytest configuration and path setup."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure the project sources are importable regardless of how pytest is invoked.
_project_root = Path(__file__).resolve().parent.parent
for _path in (str(_project_root), str(_project_root / "pysrc")):
    if _path not in sys.path:
        sys.path.insert(0, _path)

from shadowstudy.components.terrain import build_grid  # noqa: E402
from shadowstudy.models import BoundingRect, BuildingMass, FlatTerrain, GeoPoint  # noqa: E402

NYC = GeoPoint(latitude=40.7128, longitude=-74.0060)


def square_footprint(x0: float, y0: float, size: float) -> list[tuple[float, float]]:
    """Counter-clockwise square ring with its south-west corner at (x0, y0)."""
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


def make_building_grid(
    width: float = 100.0,
    height: float = 100.0,
    cell_size: float = 1.0,
    building_height: float = 30.0,
    footprint: list[tuple[float, float]] | None = None,
    ground: float = 0.0,
):
    """Flat ground with one extruded building (default: 10 m square at the center)."""
    if footprint is None:
        footprint = square_footprint(width / 2 - 5, height / 2 - 5, 10)
    building = BuildingMass.extruded(footprint, building_height, base_height=ground, id="tower")
    return build_grid(
        FlatTerrain(ground),
        [building],
        BoundingRect(0.0, width, 0.0, height),
        cell_size=cell_size,
    )


def make_flat_grid(width: float = 50.0, height: float = 50.0, cell_size: float = 1.0, elevation: float = 10.0):
    """Completely flat terrain, no buildings."""
    return build_grid(FlatTerrain(elevation), [], BoundingRect(0.0, width, 0.0, height), cell_size=cell_size)


@pytest.fixture
def nyc():
    return NYC


@pytest.fixture
def building_grid():
    return make_building_grid()


@pytest.fixture
def flat_grid():
    return make_flat_grid()


@pytest.fixture
def ramp_grid():
    """Terrain rising steadily toward the north, no buildings."""
    from shadowstudy.models import HeightGrid

    heights = np.repeat(np.arange(40, dtype=np.float64)[:, None] * 0.5, 30, axis=1)
    return HeightGrid.from_array(heights, cell_size=1.0)
