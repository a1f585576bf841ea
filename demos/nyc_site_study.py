# %%
"""
Demo: Solstice shadow study for a small Manhattan site.

Loads two buildings given as GeoJSON lng/lat footprints, projects them
into a site-centred planar frame, and runs:
    - instant shadows at solar noon on both solstices
    - daily sun hours on the summer solstice
    - facade exposure for each building

Outputs (written to ``temp/demos/nyc/``):
    - ``sun_hours_summer.npy``: sun-hours grid, row 0 along the southern edge
    - ``report.txt``: text summaries and validation reports
"""

from pathlib import Path

import numpy as np
import shadowstudy
from shadowstudy.components.sun_position import solar_noon

site = shadowstudy.GeoPoint(latitude=40.7128, longitude=-74.0060)
projection = shadowstudy.LocalProjection(site)
bounds = projection.bounds_around(150.0)

working_path = Path("temp/demos/nyc").absolute()
working_path.mkdir(parents=True, exist_ok=True)

config = shadowstudy.AnalysisConfig(cell_size=2.0, progress_bar=True)
dem = shadowstudy.DemAccuracy(vertical_error_m=0.5, nominal_resolution_m=1.0)

# %%
# Building footprints as they arrive from a map layer (lng/lat, height in meters).
features = [
    {
        "type": "Feature",
        "id": "tower",
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [-74.0063, 40.7125],
                    [-74.0057, 40.7125],
                    [-74.0057, 40.7130],
                    [-74.0063, 40.7130],
                    [-74.0063, 40.7125],
                ]
            ],
        },
        "properties": {"height": 120.0},
    },
    {
        "type": "Feature",
        "id": "annex",
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [-74.0050, 40.7120],
                    [-74.0046, 40.7120],
                    [-74.0046, 40.7124],
                    [-74.0050, 40.7124],
                    [-74.0050, 40.7120],
                ]
            ],
        },
        "properties": {},
    },
]

buildings = []
warnings = []
for feature in features:
    if "height" not in feature["properties"]:
        warnings.append(f"Building {feature['id']} has no height; assumed 15 m")
    buildings.extend(shadowstudy.BuildingMass.from_geojson(feature, projection=projection, default_height=15.0))

# %%
# Instant shadows at solar noon on the solstices
reports = []
for preset in (shadowstudy.SeasonPreset.SUMMER, shadowstudy.SeasonPreset.WINTER):
    day = shadowstudy.get_preset_date(preset)
    study = shadowstudy.run_analysis(
        site,
        terrain=shadowstudy.FlatTerrain(),
        bounds=bounds,
        buildings=buildings,
        when=solar_noon(site.longitude, day),
        dem=dem,
        building_warnings=warnings,
        config=config,
    )
    print(f"{preset.value}: {study.result.percent_shaded_display}% shaded at solar noon")
    reports.append(study.report())

# %%
# Daily sun hours on the summer solstice
daily = shadowstudy.run_analysis(
    site,
    terrain=shadowstudy.FlatTerrain(),
    bounds=bounds,
    buildings=buildings,
    preset="summer",
    dem=dem,
    building_warnings=warnings,
    config=config,
)
np.save(working_path / "sun_hours_summer.npy", daily.result.sun_hours)
reports.append(daily.report())

# %%
# Facade exposure over the same day
for exposure in shadowstudy.compute_facade_exposure(daily.sun_path, buildings):
    print(
        f"{exposure.building_id}: N {exposure.north:.1f} h, E {exposure.east:.1f} h, "
        f"S {exposure.south:.1f} h, W {exposure.west:.1f} h"
    )

(working_path / "report.txt").write_text("\n\n".join(reports))
