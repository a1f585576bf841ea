"""
Facade Exposure Tests

A wall is lit when the sun is in front of it and less than the grazing
angle away from its outward normal. Exposure depends on orientation only.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from conftest import square_footprint
from shadowstudy.components.facades import FACADE_NORMALS, compute_facade_exposure, is_facade_illuminated
from shadowstudy.components.sun_path import sun_path
from shadowstudy.models import BuildingMass, SunPosition

NYC_LAT = 40.7128
NYC_LNG = -74.0060


def sun_vector(altitude, azimuth):
    return SunPosition(altitude, azimuth).direction_vector()


@pytest.fixture
def buildings():
    return [
        BuildingMass.extruded(square_footprint(0, 0, 10), 20.0, id="a"),
        BuildingMass.extruded(square_footprint(30, 0, 10), 5.0, id="b"),
    ]


class TestIsFacadeIlluminated:
    def test_south_wall_lit_by_noon_sun(self):
        assert is_facade_illuminated(FACADE_NORMALS["south"], sun_vector(30.0, 180.0))
        assert not is_facade_illuminated(FACADE_NORMALS["north"], sun_vector(30.0, 180.0))

    def test_east_wall_lit_in_morning(self):
        morning = sun_vector(15.0, 95.0)
        assert is_facade_illuminated(FACADE_NORMALS["east"], morning)
        assert not is_facade_illuminated(FACADE_NORMALS["west"], morning)

    def test_grazing_angle(self):
        normal = (1.0, 0.0, 0.0)
        assert is_facade_illuminated(normal, sun_vector(0.0, 20.0))  # 70° from the normal
        assert is_facade_illuminated(normal, sun_vector(0.0, 10.0))  # 80°
        assert not is_facade_illuminated(normal, sun_vector(0.0, 4.0))  # 86° from the normal

    def test_custom_grazing_angle(self):
        normal = (0.0, -1.0, 0.0)
        sun = sun_vector(0.0, 120.0)  # 60° from the south normal
        assert is_facade_illuminated(normal, sun, grazing_angle_deg=85.0)
        assert not is_facade_illuminated(normal, sun, grazing_angle_deg=45.0)

    def test_vectors_need_not_be_unit(self):
        assert is_facade_illuminated((0.0, -10.0, 0.0), (0.0, -2.0, 1.0))

    def test_zero_vectors_never_lit(self):
        assert not is_facade_illuminated((0.0, 0.0, 0.0), sun_vector(30.0, 180.0))
        assert not is_facade_illuminated(FACADE_NORMALS["south"], (0.0, 0.0, 0.0))

    def test_overhead_sun_lights_no_wall(self):
        overhead = (0.0, 0.0, 1.0)
        assert not any(is_facade_illuminated(n, overhead) for n in FACADE_NORMALS.values())


class TestComputeFacadeExposure:
    def test_one_result_per_building_in_order(self, buildings):
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 6, 21))
        exposures = compute_facade_exposure(path, buildings)
        assert [e.building_id for e in exposures] == ["a", "b"]

    def test_orientation_only(self, buildings):
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 6, 21))
        a, b = compute_facade_exposure(path, buildings)
        assert (a.north, a.east, a.south, a.west) == (b.north, b.east, b.south, b.west)

    def test_winter_south_wall_sees_whole_day(self, buildings):
        """In December the sun stays in the southern sky at this latitude."""
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 12, 21))
        exposure = compute_facade_exposure(path, buildings)[0]
        assert exposure.south == pytest.approx(path.daylight_hours)
        assert exposure.north == 0.0

    def test_summer_north_wall_gets_early_and_late_sun(self, buildings):
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 6, 21))
        exposure = compute_facade_exposure(path, buildings)[0]
        assert exposure.north > 0.0
        assert exposure.north < exposure.south

    def test_east_and_west_roughly_symmetric(self, buildings):
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 3, 20))
        exposure = compute_facade_exposure(path, buildings)[0]
        assert exposure.east == pytest.approx(exposure.west, abs=0.5)

    def test_hours_are_whole_steps(self, buildings):
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 6, 21), step_minutes=30)
        exposure = compute_facade_exposure(path, buildings)[0]
        for hours in (exposure.north, exposure.east, exposure.south, exposure.west):
            assert (hours * 2) == pytest.approx(round(hours * 2))

    def test_step_inferred_from_timestamps(self, buildings):
        start = datetime(2024, 6, 21, 15, 0, tzinfo=timezone.utc)
        positions = [
            SunPosition(40.0, 170.0, start),
            SunPosition(42.0, 180.0, start + timedelta(minutes=20)),
        ]
        exposure = compute_facade_exposure(positions, buildings[:1])[0]
        # two samples of 20 minutes on the south wall
        assert exposure.south == pytest.approx(40 / 60)

    def test_explicit_step_and_night_samples_ignored(self, buildings):
        positions = [SunPosition(40.0, 180.0), SunPosition(-5.0, 180.0)]
        exposure = compute_facade_exposure(positions, buildings[:1], step_minutes=60)[0]
        assert exposure.south == 1.0
        assert exposure.east == exposure.west == exposure.north == 0.0

    def test_no_buildings(self):
        path = sun_path(NYC_LAT, NYC_LNG, date(2024, 6, 21))
        assert compute_facade_exposure(path, []) == []
