"""
Facade exposure component.

Counts, for each building, the hours of direct sun falling on its north,
east, south and west walls over a sun path. Exposure depends only on wall
orientation; neighbouring buildings and terrain do not occlude facades.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from ..constants import DEFAULT_STEP_MINUTES, FACADE_GRAZING_ANGLE_DEG
from ..models.geometry import BuildingMass
from ..models.results import FacadeExposure
from ..models.sun import SunPosition
from ..shadow_logging import get_logger

logger = get_logger(__name__)

# Outward wall normals in the local ENU frame
FACADE_NORMALS = {
    "north": (0.0, 1.0, 0.0),
    "east": (1.0, 0.0, 0.0),
    "south": (0.0, -1.0, 0.0),
    "west": (-1.0, 0.0, 0.0),
}


def is_facade_illuminated(
    normal: Sequence[float],
    sun_direction: Sequence[float],
    grazing_angle_deg: float = FACADE_GRAZING_ANGLE_DEG,
) -> bool:
    """
    True when the sun strikes a wall with outward ``normal``.

    The sun must be in front of the wall and less than ``grazing_angle_deg``
    away from the normal. Zero-length vectors are never lit.
    """
    n = np.asarray(normal, dtype=np.float64)
    s = np.asarray(sun_direction, dtype=np.float64)
    n_len = np.linalg.norm(n)
    s_len = np.linalg.norm(s)
    if n_len == 0 or s_len == 0:
        return False
    dot = float(np.dot(n / n_len, s / s_len))
    angle = math.degrees(math.acos(max(-1.0, min(1.0, dot))))
    return dot > 0 and angle < grazing_angle_deg


def _step_minutes(path: Iterable[SunPosition], positions: Sequence[SunPosition]) -> float:
    step = getattr(path, "step_minutes", None)
    if step is not None:
        return float(step)
    if len(positions) > 1 and positions[0].timestamp is not None and positions[1].timestamp is not None:
        return (positions[1].timestamp - positions[0].timestamp).total_seconds() / 60.0
    return float(DEFAULT_STEP_MINUTES)


def compute_facade_exposure(
    path: Iterable[SunPosition],
    buildings: Iterable[BuildingMass],
    step_minutes: float | None = None,
    grazing_angle_deg: float = FACADE_GRAZING_ANGLE_DEG,
) -> list[FacadeExposure]:
    """
    Direct-sun hours on each cardinal facade of every building.

    Args:
        path: Sun positions; samples with altitude <= 0 are ignored.
        buildings: Buildings to report on.
        step_minutes: Time represented by each sample. Defaults to the
            path's step, then to the spacing of the first two samples.
        grazing_angle_deg: Largest sun-to-normal angle that still lights a wall.

    Returns:
        One FacadeExposure per building, in input order.
    """
    positions = tuple(path)
    step = step_minutes if step_minutes is not None else _step_minutes(path, positions)

    minutes = dict.fromkeys(FACADE_NORMALS, 0.0)
    for position in positions:
        if position.altitude_degrees <= 0:
            continue
        direction = position.direction_vector()
        for facade, normal in FACADE_NORMALS.items():
            if is_facade_illuminated(normal, direction, grazing_angle_deg):
                minutes[facade] += step

    hours = {facade: value / 60.0 for facade, value in minutes.items()}
    exposures = [FacadeExposure(building_id=building.id, **hours) for building in buildings]
    logger.debug(f"Facade exposure for {len(exposures)} buildings over {len(positions)} sun positions")
    return exposures
