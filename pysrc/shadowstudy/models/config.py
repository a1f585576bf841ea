"""Analysis configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from ..constants import (
    CIVIL_TWILIGHT_DEG,
    DEFAULT_CELL_SIZE_M,
    DEFAULT_STEP_MINUTES,
    FACADE_GRAZING_ANGLE_DEG,
    GOLDEN_HOUR_DEG,
    MAX_GRID_CELLS,
)
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """
    Run-time settings for shadow analyses.

    Groups all computational settings in one typed object.
    Pure configuration - no geometry or results.

    Attributes:
        step_minutes: Sun-path sampling step in minutes. Default 15.
        cell_size: Analysis grid cell size in meters. Default 2.0.
            The UI offers 1/2/5 m presets; any positive value is valid.
        max_cells: Largest grid the engine accepts. Default 500 000.
        civil_twilight_deg: Sun altitude defining dawn/dusk. Default -6.
        golden_hour_deg: Sun altitude bounding the golden hour. Default 6.
        facade_grazing_angle_deg: Facades farther than this from the sun
            direction count as unlit. Default 85.
        progress_bar: Show a tqdm bar during daily analyses. Default False.

    Examples:
        >>> config = AnalysisConfig.defaults()
        >>> config.save("my_config.json")

        >>> config = AnalysisConfig(step_minutes=10, cell_size=1.0)

        >>> config = AnalysisConfig.from_json("site_settings.json")
    """

    step_minutes: float = DEFAULT_STEP_MINUTES
    cell_size: float = DEFAULT_CELL_SIZE_M
    max_cells: int = MAX_GRID_CELLS
    civil_twilight_deg: float = CIVIL_TWILIGHT_DEG
    golden_hour_deg: float = GOLDEN_HOUR_DEG
    facade_grazing_angle_deg: float = FACADE_GRAZING_ANGLE_DEG
    progress_bar: bool = False

    def __post_init__(self):
        if self.step_minutes <= 0:
            raise ConfigurationError("step_minutes", f"must be positive, got {self.step_minutes}")
        if self.cell_size <= 0:
            raise ConfigurationError("cell_size", f"must be positive, got {self.cell_size}")
        if self.max_cells <= 0:
            raise ConfigurationError("max_cells", f"must be positive, got {self.max_cells}")
        if not 0 < self.facade_grazing_angle_deg <= 90:
            raise ConfigurationError(
                "facade_grazing_angle_deg", f"must be in (0, 90], got {self.facade_grazing_angle_deg}"
            )

    @classmethod
    def defaults(cls) -> AnalysisConfig:
        """Standard configuration for most users."""
        return cls()

    @classmethod
    def from_json(cls, path: str | Path | None = None) -> AnalysisConfig:
        """
        Load configuration from a settings JSON file.

        Args:
            path: Path to a settings file laid out like the bundled
                engine_defaults.json. None loads the bundled file.

        Returns:
            AnalysisConfig with values from the file; missing sections keep
            their defaults.
        """
        from ..config import load_settings

        settings = load_settings(path)
        config = cls()

        if hasattr(settings, "SunPath"):
            config.step_minutes = getattr(settings.SunPath, "step_minutes", config.step_minutes)
        if hasattr(settings, "Grid"):
            config.cell_size = float(getattr(settings.Grid, "cell_size", config.cell_size))
            config.max_cells = int(getattr(settings.Grid, "max_cells", config.max_cells))
        if hasattr(settings, "SolarTimes"):
            config.civil_twilight_deg = getattr(settings.SolarTimes, "civil_twilight_deg", config.civil_twilight_deg)
            config.golden_hour_deg = getattr(settings.SolarTimes, "golden_hour_deg", config.golden_hour_deg)
        if hasattr(settings, "Facades"):
            config.facade_grazing_angle_deg = getattr(
                settings.Facades, "grazing_angle_deg", config.facade_grazing_angle_deg
            )
        if hasattr(settings, "Progress"):
            config.progress_bar = bool(getattr(settings.Progress, "progress_bar", config.progress_bar))

        # Re-run validation on the loaded values
        config.__post_init__()
        logger.debug(f"Loaded analysis config from {path or 'bundled defaults'}")
        return config

    def to_dict(self) -> dict:
        """Settings-file layout of this configuration."""
        values = asdict(self)
        return {
            "SunPath": {"step_minutes": values["step_minutes"]},
            "Grid": {"cell_size": values["cell_size"], "max_cells": values["max_cells"]},
            "SolarTimes": {
                "civil_twilight_deg": values["civil_twilight_deg"],
                "golden_hour_deg": values["golden_hour_deg"],
            },
            "Facades": {"grazing_angle_deg": values["facade_grazing_angle_deg"]},
            "Progress": {"progress_bar": values["progress_bar"]},
        }

    def save(self, path: str | Path) -> None:
        """Write this configuration as a settings JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
