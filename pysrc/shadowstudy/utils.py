"""Utility functions for namespace conversion and grid arithmetic."""

from __future__ import annotations

import math
from types import SimpleNamespace
from typing import Any

# Rounding slack, in ULPs, when deriving grid dimensions, so 0.3 / 0.1 gives 3, not 4
_DIMENSION_ULPS = 4


# =============================================================================
# Namespace Conversion (for JSON settings loading)
# =============================================================================


def dict_to_namespace(d: dict[str, Any] | list | Any) -> SimpleNamespace | list | Any:
    """
    Recursively convert dicts to SimpleNamespace.

    Args:
        d: Dictionary, list, or scalar value to convert

    Returns:
        SimpleNamespace for dicts, list of converted items for lists, or original value for scalars
    """
    if isinstance(d, dict):
        return SimpleNamespace(**{k: dict_to_namespace(v) for k, v in d.items()})
    elif isinstance(d, list):
        return [dict_to_namespace(i) for i in d]
    else:
        return d


def namespace_to_dict(ns: SimpleNamespace | Any) -> dict | list | Any:
    """
    Recursively convert SimpleNamespace to dict for JSON serialization.

    Inverse of dict_to_namespace.
    """
    if isinstance(ns, SimpleNamespace):
        return {k: namespace_to_dict(v) for k, v in vars(ns).items()}
    elif isinstance(ns, list):
        return [namespace_to_dict(i) for i in ns]
    else:
        return ns


# =============================================================================
# Grid arithmetic
# =============================================================================


def grid_dimension(extent: float, cell_size: float, scale: float = 0.0) -> int:
    """
    Number of cells needed to cover ``extent`` at ``cell_size``.

    ``ceil(extent / cell_size)``. A quotient within a few ULPs of an integer
    counts as that integer; when ``extent`` is a difference of coordinates,
    ``scale`` is their magnitude and widens the slack to their rounding.

    Example:
        >>> grid_dimension(100.0, 2.0)
        50
        >>> grid_dimension(101.0, 2.0)
        51
    """
    ratio = extent / cell_size
    nearest = round(ratio)
    noise = _DIMENSION_ULPS * (math.ulp(ratio) + math.ulp(max(abs(extent), abs(scale))) / cell_size)
    if abs(ratio - nearest) <= noise:
        return max(0, nearest)
    return max(0, math.ceil(ratio))


def normalize_azimuth(azimuth: float) -> float:
    """Wrap an azimuth in degrees into [0, 360)."""
    wrapped = azimuth % 360.0
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped
