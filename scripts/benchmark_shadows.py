"""
Benchmark: instant shadow masks and daily sun-hours aggregation

Builds a synthetic block of towers on gently sloping terrain and times the
ray-marched shadow caster at the three cell-size presets.

Usage:
    python scripts/benchmark_shadows.py
    python scripts/benchmark_shadows.py --repeats 5 --pos all --daily
"""

from __future__ import annotations

import argparse
import time
from datetime import date

import numpy as np
from shadowstudy import BoundingRect, BuildingMass, RasterTerrain, build_height_grid, compute_sun_hours, get_sun_path
from shadowstudy.components.shadows import compute_shadow_mask
from shadowstudy.models import SunPosition

SITE_SIZE_M = 400.0
CELL_SIZES = (1.0, 2.0, 5.0)

SUN_POSITIONS = [
    {"name": "morning", "azimuth": 90.0, "altitude": 30.0},
    {"name": "noon", "azimuth": 180.0, "altitude": 60.0},
    {"name": "afternoon", "azimuth": 270.0, "altitude": 45.0},
]


def make_site(seed: int = 0):
    """Sloping ground with a 6×6 block of towers of random height."""
    rng = np.random.default_rng(seed)
    bounds = BoundingRect(0.0, SITE_SIZE_M, 0.0, SITE_SIZE_M)
    ramp = np.linspace(20.0, 0.0, 41)[:, None].repeat(41, axis=1)
    terrain = RasterTerrain(ramp, bounds)

    buildings = []
    for i in range(6):
        for j in range(6):
            x0, y0 = 40.0 + i * 55.0, 40.0 + j * 55.0
            footprint = [(x0, y0), (x0 + 30, y0), (x0 + 30, y0 + 30), (x0, y0 + 30)]
            buildings.append(BuildingMass.extruded(footprint, float(rng.uniform(10, 80)), base_height=20.0))
    return terrain, bounds, buildings


def time_fn(fn, repeats: int):
    samples = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        samples.append(time.perf_counter() - t0)
    return samples


def _fmt_samples(samples: list[float]) -> str:
    avg = sum(samples) / len(samples)
    return f"min={min(samples):.3f}s  avg={avg:.3f}s  max={max(samples):.3f}s"


def _print_table(rows: list[tuple[str, list[float]]]) -> None:
    col_label = 24
    rule = "-" * (col_label + 36)
    print(f"  {'grid':<{col_label}}timing")
    print(f"  {rule}")
    for label, samples in rows:
        print(f"  {label:<{col_label}}{_fmt_samples(samples)}")


def main(repeats: int, pos: str):
    parser = argparse.ArgumentParser(description="Benchmark the shadow caster and sun-hours aggregation")
    parser.add_argument(
        "--repeats", type=int, default=repeats, help=f"Number of timed repetitions (default: {repeats})"
    )
    parser.add_argument(
        "--pos",
        choices=["morning", "noon", "afternoon", "all"],
        default=pos,
        help=f"Sun position to benchmark (default: {pos})",
    )
    parser.add_argument("--daily", action="store_true", help="Also time a full-day sun-hours run")
    args = parser.parse_args()

    terrain, bounds, buildings = make_site()
    grids = {size: build_height_grid(terrain, bounds, buildings, cell_size=size) for size in CELL_SIZES}
    print(f"Site: {SITE_SIZE_M:g}×{SITE_SIZE_M:g} m, {len(buildings)} buildings, repeats={args.repeats}")

    sun_positions = SUN_POSITIONS if args.pos == "all" else [p for p in SUN_POSITIONS if p["name"] == args.pos]

    for sun_pos in sun_positions:
        print(f"\n  Sun: {sun_pos['name']}  (az={sun_pos['azimuth']}°, alt={sun_pos['altitude']}°)")
        print()
        sun = SunPosition(altitude_degrees=sun_pos["altitude"], azimuth_degrees=sun_pos["azimuth"])
        rows = []
        for size, grid in grids.items():
            compute_shadow_mask(sun, grid)  # warmup
            samples = time_fn(lambda g=grid: compute_shadow_mask(sun, g), args.repeats)
            rows.append((f"{grid.columns}×{grid.rows} @ {size:g} m", samples))
        _print_table(rows)

    if args.daily:
        path = get_sun_path(40.7128, -74.0060, date(2024, 6, 21))
        print(f"\n  Daily: {len(path)} sun positions ({path.step_minutes} min step)")
        print()
        rows = []
        for size, grid in grids.items():
            samples = time_fn(lambda g=grid: compute_sun_hours(path, g), 1)
            rows.append((f"{grid.columns}×{grid.rows} @ {size:g} m", samples))
        _print_table(rows)


if __name__ == "__main__":
    main(repeats=3, pos="noon")
