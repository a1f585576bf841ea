"""Settings loading from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

from .errors import ConfigurationError
from .utils import dict_to_namespace

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "data" / "engine_defaults.json"


def load_settings(settings_json_path: str | Path | None = None) -> SimpleNamespace:
    """
    Load engine settings from a JSON file.

    Settings cover run-time choices only (sun-path step, cell size, grid cap,
    twilight angles, facade grazing angle, progress bar). The empirical
    accuracy coefficients are fixed in :mod:`shadowstudy.constants`.

    Args:
        settings_json_path: Path to a settings JSON file.
            If None (default), loads the bundled engine_defaults.json.

    Returns:
        SimpleNamespace object with nested settings accessible via attributes.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        ConfigurationError: If the file is not valid JSON.

    Examples:
        >>> settings = load_settings()
        >>> settings.SunPath.step_minutes  # 15
        >>> settings.Grid.max_cells  # 500000
    """
    settings_path = DEFAULT_SETTINGS_PATH if settings_json_path is None else Path(settings_json_path)

    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with open(settings_path) as f:
        try:
            settings_dict = json.load(f)
        except json.JSONDecodeError as err:
            raise ConfigurationError(str(settings_path), f"not valid JSON ({err})") from err

    return dict_to_namespace(settings_dict)
