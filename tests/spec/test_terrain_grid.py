"""
Terrain Grid Sampler Tests

Grid dimensions follow ceil(extent / cell_size); terrain is sampled at
cell centers; buildings only ever raise a cell, and the tallest of
overlapping footprints wins.
"""

import numpy as np
import pytest
from conftest import square_footprint
from shadowstudy.components.terrain import build_grid
from shadowstudy.errors import GridTooLargeError, InvalidGeometryError
from shadowstudy.models import (
    BoundingRect,
    BuildingMass,
    FlatTerrain,
    HeightGrid,
    PointTerrain,
    RasterTerrain,
    terrain_from_geojson,
)


class TestGridDimensions:
    @pytest.mark.parametrize(
        "width,height,cell_size,expected",
        [
            (100.0, 100.0, 1.0, (100, 100)),
            (100.0, 60.0, 2.0, (30, 50)),
            (101.0, 99.0, 2.0, (50, 51)),
            (10.0, 10.0, 5.0, (2, 2)),
            (0.3, 0.3, 1.0, (1, 1)),
        ],
    )
    def test_ceil_dimensions(self, width, height, cell_size, expected):
        grid = build_grid(FlatTerrain(), [], BoundingRect(0, width, 0, height), cell_size=cell_size)
        assert grid.shape == expected
        assert grid.rows == expected[0]
        assert grid.columns == expected[1]
        assert grid.cell_count == expected[0] * expected[1]

    def test_float_noise_does_not_add_a_cell(self):
        """1.1 / 0.1 is 11.000000000000002 in floating point."""
        grid = build_grid(FlatTerrain(), [], BoundingRect(0, 1.1, 0, 1.1), cell_size=0.1)
        assert grid.shape == (11, 11)

    def test_real_overshoot_adds_a_cell(self):
        grid = build_grid(FlatTerrain(), [], BoundingRect(0, 100.0000001, 0, 10), cell_size=1.0)
        assert grid.columns == 101

    def test_large_map_coordinates(self):
        """Bounds far from the origin round their width; the grid still matches them."""
        grid = HeightGrid.from_array(np.zeros((10, 100)), cell_size=0.1, origin=(500000.3, 4500000.7))
        assert grid.shape == (10, 100)
        rebuilt = build_grid(FlatTerrain(), [], grid.bounds, cell_size=0.1)
        assert rebuilt.shape == (10, 100)

    def test_row_zero_is_south(self):
        grid = build_grid(FlatTerrain(), [], BoundingRect(10, 20, 100, 110), cell_size=1.0)
        assert grid.cell_center(0, 0) == (10.5, 100.5)
        assert grid.cell_center(9, 9) == (19.5, 109.5)

    def test_heights_read_only(self):
        grid = build_grid(FlatTerrain(3.0), [], BoundingRect(0, 10, 0, 10), cell_size=1.0)
        with pytest.raises(ValueError):
            grid.heights[0, 0] = 100.0


class TestErrors:
    def test_missing_terrain(self):
        with pytest.raises(InvalidGeometryError) as exc_info:
            build_grid(None, [], BoundingRect(0, 10, 0, 10), cell_size=1.0)
        assert exc_info.value.field == "terrain"

    @pytest.mark.parametrize("cell_size", [0.0, -1.0])
    def test_non_positive_cell_size(self, cell_size):
        with pytest.raises(InvalidGeometryError):
            build_grid(FlatTerrain(), [], BoundingRect(0, 10, 0, 10), cell_size=cell_size)

    def test_degenerate_bounds(self):
        with pytest.raises(InvalidGeometryError):
            BoundingRect(10, 10, 0, 10)
        with pytest.raises(InvalidGeometryError):
            BoundingRect(0, 10, 5, 1)

    def test_grid_too_large(self):
        with pytest.raises(GridTooLargeError) as exc_info:
            build_grid(FlatTerrain(), [], BoundingRect(0, 5000, 0, 5000), cell_size=1.0)
        assert exc_info.value.cell_count == 25_000_000
        assert exc_info.value.max_cells == 500_000
        assert isinstance(exc_info.value, InvalidGeometryError)

    def test_custom_cell_cap(self):
        with pytest.raises(GridTooLargeError):
            build_grid(FlatTerrain(), [], BoundingRect(0, 20, 0, 20), cell_size=1.0, max_cells=100)

    def test_height_grid_shape_must_match_bounds(self):
        with pytest.raises(InvalidGeometryError):
            HeightGrid(heights=np.zeros((5, 5)), bounds=BoundingRect(0, 10, 0, 10), cell_size=1.0)

    def test_height_grid_rejects_nan(self):
        heights = np.zeros((4, 4))
        heights[1, 1] = np.nan
        with pytest.raises(InvalidGeometryError):
            HeightGrid.from_array(heights, cell_size=1.0)


class TestBuildings:
    def test_building_raises_cells_inside_footprint(self):
        building = BuildingMass.extruded(square_footprint(4, 4, 2), 12.0)
        grid = build_grid(FlatTerrain(1.0), [building], BoundingRect(0, 10, 0, 10), cell_size=1.0)
        assert grid.heights[4, 4] == 12.0
        assert grid.heights[5, 5] == 12.0
        assert grid.heights[3, 3] == 1.0
        assert grid.building_count == 1
        assert grid.building_cell_count == 4

    def test_taller_overlapping_footprint_wins(self):
        low = BuildingMass.extruded(square_footprint(0, 0, 6), 10.0, id="low")
        high = BuildingMass.extruded(square_footprint(3, 3, 6), 25.0, id="high")
        for order in ([low, high], [high, low]):
            grid = build_grid(FlatTerrain(), order, BoundingRect(0, 10, 0, 10), cell_size=1.0)
            assert grid.heights[4, 4] == 25.0  # overlap
            assert grid.heights[1, 1] == 10.0
            assert grid.heights[8, 8] == 25.0

    def test_building_never_lowers_terrain(self):
        """A building whose top is below the ground does not dig a hole."""
        sunken = BuildingMass(footprint=tuple(square_footprint(2, 2, 4)), base_height=0.0, top_height=5.0)
        grid = build_grid(FlatTerrain(20.0), [sunken], BoundingRect(0, 10, 0, 10), cell_size=1.0)
        assert np.all(grid.heights == 20.0)

    def test_building_outside_bounds_ignored(self):
        far = BuildingMass.extruded(square_footprint(100, 100, 5), 50.0)
        grid = build_grid(FlatTerrain(), [far], BoundingRect(0, 10, 0, 10), cell_size=1.0)
        assert np.all(grid.heights == 0.0)
        assert grid.building_count == 1
        assert grid.building_cell_count == 0

    def test_building_height_relative_to_base(self):
        building = BuildingMass.extruded(square_footprint(0, 0, 4), 10.0, base_height=5.0)
        assert building.top_height == 15.0
        assert building.height == 10.0

    def test_invalid_footprints(self):
        with pytest.raises(InvalidGeometryError):
            BuildingMass.extruded([(0, 0), (1, 0)], 10.0)
        with pytest.raises(InvalidGeometryError):
            BuildingMass.extruded([(0, 0), (1, 1), (2, 2)], 10.0)
        with pytest.raises(InvalidGeometryError):
            BuildingMass(footprint=tuple(square_footprint(0, 0, 4)), base_height=10.0, top_height=5.0)


class TestTerrainSurfaces:
    def test_raster_terrain_sampled_at_cell_centers(self):
        # North-up DEM: row 0 is the northern edge
        dem = np.array([[10.0, 10.0], [0.0, 0.0]])
        terrain = RasterTerrain(dem, BoundingRect(0, 20, 0, 20))
        grid = build_grid(terrain, [], BoundingRect(0, 20, 0, 20), cell_size=10.0)
        assert grid.heights[0, 0] == pytest.approx(0.0)
        assert grid.heights[1, 0] == pytest.approx(10.0)

    def test_raster_terrain_bilinear(self):
        dem = np.array([[10.0, 10.0], [0.0, 0.0]])
        terrain = RasterTerrain(dem, BoundingRect(0, 20, 0, 20))
        assert terrain.sample(np.array([10.0]), np.array([10.0]))[0] == pytest.approx(5.0)

    def test_point_terrain_linear_inside_hull(self):
        points = np.array([[0, 0, 0], [10, 0, 10], [0, 10, 0], [10, 10, 10]], dtype=float)
        terrain = PointTerrain(points)
        assert terrain.sample(np.array([5.0]), np.array([5.0]))[0] == pytest.approx(5.0)

    def test_point_terrain_nearest_outside_hull(self):
        points = np.array([[0, 0, 0], [10, 0, 10], [0, 10, 0], [10, 10, 10]], dtype=float)
        terrain = PointTerrain(points)
        assert terrain.sample(np.array([30.0]), np.array([5.0]))[0] == pytest.approx(10.0)

    def test_terrain_from_geojson_points(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0, 1.0]}, "properties": {}},
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [10, 0]},
                    "properties": {"elevation": 3},
                },
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 10, 5.0]}, "properties": {}},
            ],
        }
        terrain = terrain_from_geojson(collection)
        assert terrain.points.shape == (3, 3)
        assert terrain.points[1, 2] == 3.0

    def test_terrain_from_geojson_rejects_polygons(self):
        feature = {
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
            "properties": {},
        }
        with pytest.raises(InvalidGeometryError):
            terrain_from_geojson(feature)
