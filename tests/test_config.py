"""
Tests for settings loading and AnalysisConfig.
"""

import json

import pytest
from shadowstudy.config import DEFAULT_SETTINGS_PATH, load_settings
from shadowstudy.errors import ConfigurationError
from shadowstudy.models import AnalysisConfig
from shadowstudy.utils import dict_to_namespace, namespace_to_dict


class TestLoadSettings:
    def test_bundled_defaults(self):
        settings = load_settings()
        assert settings.SunPath.step_minutes == 15
        assert settings.Grid.cell_size == 2.0
        assert settings.Grid.cell_size_presets == [1.0, 2.0, 5.0]
        assert settings.Grid.max_cells == 500_000
        assert settings.SolarTimes.civil_twilight_deg == -6.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_namespace_round_trip(self):
        with open(DEFAULT_SETTINGS_PATH) as f:
            raw = json.load(f)
        assert namespace_to_dict(dict_to_namespace(raw)) == raw


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig.defaults()
        assert config.step_minutes == 15
        assert config.cell_size == 2.0
        assert config.max_cells == 500_000
        assert config.civil_twilight_deg == -6.0
        assert config.golden_hour_deg == 6.0
        assert config.facade_grazing_angle_deg == 85.0
        assert config.progress_bar is False

    def test_defaults_match_bundled_file(self):
        assert AnalysisConfig.from_json() == AnalysisConfig.defaults()

    @pytest.mark.parametrize(
        "kwargs,parameter",
        [
            ({"step_minutes": 0}, "step_minutes"),
            ({"cell_size": -1.0}, "cell_size"),
            ({"max_cells": 0}, "max_cells"),
            ({"facade_grazing_angle_deg": 120.0}, "facade_grazing_angle_deg"),
        ],
    )
    def test_validation(self, kwargs, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            AnalysisConfig(**kwargs)
        assert exc_info.value.parameter == parameter

    def test_save_and_load(self, tmp_path):
        config = AnalysisConfig(step_minutes=10, cell_size=1.0, progress_bar=True)
        path = tmp_path / "nested" / "settings.json"
        config.save(path)
        assert AnalysisConfig.from_json(path) == config

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"Grid": {"cell_size": 5.0}}))
        config = AnalysisConfig.from_json(path)
        assert config.cell_size == 5.0
        assert config.step_minutes == 15

    def test_invalid_values_in_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"SunPath": {"step_minutes": -5}}))
        with pytest.raises(ConfigurationError):
            AnalysisConfig.from_json(path)
