"""
Tests for the simplified shadow-study API.

End-to-end runs at a New York site: instant analyses at solar noon on
the solstices, daily sun-hours analyses, and the configuration defaults
the entry points apply.
"""

from datetime import date

import numpy as np
import pytest
import shadowstudy
from conftest import NYC, square_footprint
from shadowstudy import (
    AnalysisConfig,
    BoundingRect,
    BuildingMass,
    DemAccuracy,
    FlatTerrain,
    QualityGrade,
    SeasonPreset,
    ShadowStudy,
    build_height_grid,
    compute_facade_exposure,
    get_preset_date,
    get_solar_times,
    get_sun_path,
    get_sun_position,
    run_analysis,
)
from shadowstudy.components.sun_position import solar_noon
from shadowstudy.models import AnalysisMode

SUMMER = date(2024, 6, 21)
WINTER = date(2024, 12, 21)
SITE_BOUNDS = BoundingRect(-50.0, 50.0, -50.0, 50.0)
FINE = AnalysisConfig(cell_size=1.0)


@pytest.fixture
def tower():
    """30 m tower on a 10 m square footprint centred on the site."""
    return [BuildingMass.extruded(square_footprint(-5, -5, 10), 30.0, id="tower")]


def instant_study(day, buildings, **kwargs):
    return run_analysis(
        NYC,
        terrain=FlatTerrain(),
        bounds=SITE_BOUNDS,
        buildings=buildings,
        when=solar_noon(NYC.longitude, day),
        config=FINE,
        **kwargs,
    )


class TestInstantAnalysis:
    def test_summer_noon(self, tower):
        study = instant_study(SUMMER, tower)
        assert isinstance(study, ShadowStudy)
        assert study.result.mode is AnalysisMode.INSTANT
        assert study.sun_position.altitude_degrees == pytest.approx(72.7, abs=0.3)
        # 30 / tan(72.7°) ≈ 9.3 m of shadow behind a 10 m wide tower on 100 × 100 m
        assert study.result.percent_shaded == pytest.approx(0.9, abs=0.2)
        assert study.sun_path is None

    def test_winter_noon_longer_shadow(self, tower):
        summer = instant_study(SUMMER, tower)
        winter = instant_study(WINTER, tower)
        assert winter.sun_position.altitude_degrees == pytest.approx(25.85, abs=0.3)
        assert winter.result.percent_shaded > 4 * summer.result.percent_shaded

    def test_shadow_falls_north(self, tower):
        shaded = instant_study(SUMMER, tower).result.shaded
        rows, _ = np.nonzero(shaded)
        assert rows.min() >= 55

    def test_no_buildings_no_shadow(self):
        study = instant_study(SUMMER, [])
        assert study.result.percent_shaded == 0.0
        assert study.result.building_count == 0

    def test_deterministic(self, tower):
        a = instant_study(SUMMER, tower)
        b = instant_study(SUMMER, tower)
        assert np.array_equal(a.result.shaded, b.result.shaded)
        assert a.result.percent_shaded == b.result.percent_shaded

    def test_validation_attached(self, tower):
        study = instant_study(SUMMER, tower, dem=DemAccuracy(0.5, 5.0))
        assert study.validation.score == 1.0
        assert study.validation.assessment.quality_grade is QualityGrade.EXCELLENT
        text = study.report()
        assert "Shadow analysis (instant)" in text
        assert "100% quality score" in text


class TestDailyAnalysis:
    def test_daily_by_date(self, tower):
        calls = []
        study = run_analysis(
            NYC,
            terrain=FlatTerrain(),
            bounds=BoundingRect(-20.0, 20.0, -20.0, 20.0),
            buildings=tower,
            date=SUMMER,
            config=FINE,
            on_progress=lambda done, total: calls.append((done, total)),
        )
        result = study.result
        assert result.mode is AnalysisMode.DAILY
        assert result.date == SUMMER
        assert study.sun_position is None
        assert len(study.sun_path) == result.stats.sun_positions
        assert result.sun_hours.max() == result.stats.daylight_hours
        assert result.stats.daylight_hours <= get_solar_times(NYC.latitude, NYC.longitude, SUMMER).daylight_hours
        assert calls[-1] == (len(study.sun_path), len(study.sun_path))
        assert study.validation.score_percent == 75.0

    def test_daily_by_preset(self):
        study = run_analysis(
            NYC,
            terrain=FlatTerrain(),
            bounds=BoundingRect(0.0, 10.0, 0.0, 10.0),
            preset=SeasonPreset.WINTER,
            config=FINE,
        )
        assert (study.result.date.month, study.result.date.day) == (12, 21)

    def test_summer_more_sun_than_winter(self):
        kwargs = dict(terrain=FlatTerrain(), bounds=BoundingRect(0.0, 10.0, 0.0, 10.0), config=FINE)
        summer = run_analysis(NYC, date=SUMMER, **kwargs)
        winter = run_analysis(NYC, date=WINTER, **kwargs)
        assert summer.result.stats.mean_sun_hours > winter.result.stats.mean_sun_hours + 4

    def test_mode_required(self):
        with pytest.raises(shadowstudy.ConfigurationError):
            run_analysis(NYC, terrain=FlatTerrain(), bounds=SITE_BOUNDS)


class TestEntryPointDefaults:
    def test_sun_path_step_from_config(self):
        path = get_sun_path(NYC.latitude, NYC.longitude, SUMMER, config=AnalysisConfig(step_minutes=30))
        assert path.step_minutes == 30
        assert get_sun_path(NYC.latitude, NYC.longitude, SUMMER).step_minutes == 15

    def test_explicit_step_wins(self):
        path = get_sun_path(NYC.latitude, NYC.longitude, SUMMER, step_minutes=5, config=AnalysisConfig(step_minutes=30))
        assert path.step_minutes == 5

    def test_grid_cell_size_from_config(self):
        grid = build_height_grid(FlatTerrain(), SITE_BOUNDS)
        assert grid.cell_size == 2.0
        assert grid.shape == (50, 50)

    def test_grid_cap_from_config(self):
        with pytest.raises(shadowstudy.GridTooLargeError):
            build_height_grid(FlatTerrain(), SITE_BOUNDS, cell_size=1.0, config=AnalysisConfig(max_cells=100))

    def test_solar_times_twilight_from_config(self):
        civil = get_solar_times(NYC.latitude, NYC.longitude, SUMMER)
        nautical = get_solar_times(NYC.latitude, NYC.longitude, SUMMER, config=AnalysisConfig(civil_twilight_deg=-12))
        assert nautical.dawn < civil.dawn

    def test_facade_grazing_angle_from_config(self):
        path = get_sun_path(NYC.latitude, NYC.longitude, SUMMER)
        buildings = [BuildingMass.extruded(square_footprint(0, 0, 10), 20.0, id="a")]
        wide = compute_facade_exposure(path, buildings)[0]
        narrow = compute_facade_exposure(path, buildings, config=AnalysisConfig(facade_grazing_angle_deg=45.0))[0]
        # The solstice sun rises and sets more than 45° from due north
        assert wide.north > 0.0
        assert narrow.north == 0.0
        assert narrow.south < wide.south

    def test_preset_date(self):
        assert get_preset_date("summer", 2025) == date(2025, 6, 21)

    def test_sun_position(self):
        pos = get_sun_position(NYC.latitude, NYC.longitude, solar_noon(NYC.longitude, SUMMER))
        assert pos.is_up

    def test_version(self):
        assert isinstance(shadowstudy.__version__, str)
