"""
Site-centred planar projection.

Geographic input (WGS84 lng/lat) is converted once, at ingestion, into a
local planar frame in meters centred on the site: x grows east, y grows
north. The frame is an azimuthal equidistant projection about the site
origin, so distances near the site are true meters.

Usage:
    from shadowstudy.projection import LocalProjection
    from shadowstudy.models import GeoPoint

    proj = LocalProjection(GeoPoint(40.7128, -74.0060))
    x, y = proj.to_local(latitude=40.7138, longitude=-74.0060)   # ~ (0, 111)
    bounds = proj.bounds_around(250.0)
"""

from __future__ import annotations

from collections.abc import Sequence

from pyproj import CRS, Transformer

from .errors import InvalidGeometryError
from .models.geometry import BoundingRect, GeoPoint

WGS84 = "EPSG:4326"


class LocalProjection:
    """Transform between WGS84 and a site-centred planar frame (meters)."""

    def __init__(self, origin: GeoPoint):
        self.origin = origin
        self.crs = CRS.from_proj4(
            f"+proj=aeqd +lat_0={origin.latitude} +lon_0={origin.longitude} +datum=WGS84 +units=m +no_defs"
        )
        self._forward = Transformer.from_crs(WGS84, self.crs, always_xy=True)
        self._inverse = Transformer.from_crs(self.crs, WGS84, always_xy=True)

    def __repr__(self) -> str:
        return f"LocalProjection(origin={self.origin!r})"

    def to_local(self, latitude: float, longitude: float) -> tuple[float, float]:
        """Planar (x, y) in meters of a WGS84 location."""
        x, y = self._forward.transform(longitude, latitude)
        return float(x), float(y)

    def to_geo(self, x: float, y: float) -> GeoPoint:
        """WGS84 location of a planar (x, y)."""
        lng, lat = self._inverse.transform(x, y)
        return GeoPoint(latitude=float(lat), longitude=float(lng))

    def project_ring(self, ring: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
        """
        Project a ring of GeoJSON (lng, lat[, z]) positions.

        Any third coordinate is dropped.
        """
        if not ring:
            raise InvalidGeometryError("Cannot project an empty ring", field="footprint")
        lngs = [float(p[0]) for p in ring]
        lats = [float(p[1]) for p in ring]
        xs, ys = self._forward.transform(lngs, lats)
        return [(float(x), float(y)) for x, y in zip(xs, ys)]

    def bounds_around(self, radius_m: float) -> BoundingRect:
        """Square analysis bounds of half-width ``radius_m`` centred on the origin."""
        if not radius_m > 0:
            raise InvalidGeometryError(
                f"Radius must be positive, got {radius_m}", field="bounds", got=str(radius_m)
            )
        return BoundingRect(min_x=-radius_m, max_x=radius_m, min_y=-radius_m, max_y=radius_m)
