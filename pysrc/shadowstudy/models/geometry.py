"""Site geometry models: points, bounds, building massing and terrain surfaces.

Loosely-typed GeoJSON-like input is checked once, at ingestion, and turned
into the typed objects below. Everything downstream works on these types.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

import numpy as np
from scipy.interpolate import RegularGridInterpolator, griddata
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiPoint, MultiPolygon, Point, Polygon, shape

from ..errors import InvalidGeometryError

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from ..projection import LocalProjection

SUPPORTED_GEOMETRY_TYPES = ("Point", "MultiPoint", "LineString", "Polygon", "MultiPolygon")

Geometry = Union[Point, MultiPoint, LineString, Polygon, MultiPolygon]


@dataclass(frozen=True)
class GeoPoint:
    """
    WGS84 location.

    Attributes:
        latitude: Latitude in degrees (north positive).
        longitude: Longitude in degrees (east positive).
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be in [-180, 180], got {self.longitude}")


@dataclass(frozen=True)
class BoundingRect:
    """
    Axis-aligned rectangle in the local planar frame (meters).

    All grid math operates in this frame: x grows east, y grows north.
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self):
        values = (self.min_x, self.max_x, self.min_y, self.max_y)
        if not all(np.isfinite(values)):
            raise InvalidGeometryError("Bounds must be finite", field="bounds", got=str(values))
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise InvalidGeometryError(
                f"Degenerate bounds: x [{self.min_x}, {self.max_x}], y [{self.min_y}, {self.max_y}]",
                field="bounds",
                expected="max_x > min_x and max_y > min_y",
                got=str(values),
            )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]], padding: float = 0.0) -> BoundingRect:
        """Smallest rectangle holding all (x, y) points, grown by ``padding``."""
        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] < 2:
            raise InvalidGeometryError("Need at least one (x, y) point", field="points", got=str(arr.shape))
        return cls(
            min_x=float(arr[:, 0].min()) - padding,
            max_x=float(arr[:, 0].max()) + padding,
            min_y=float(arr[:, 1].min()) - padding,
            max_y=float(arr[:, 1].max()) + padding,
        )


def parse_geometry(obj: Mapping[str, Any] | Geometry) -> Geometry:
    """
    Turn a GeoJSON-like geometry (or Feature) into a typed shapely geometry.

    Accepts Point, MultiPoint, LineString, Polygon and MultiPolygon. Features
    are unwrapped to their ``geometry`` member.

    Raises:
        InvalidGeometryError: Unsupported kind, malformed coordinates or an
            invalid/empty result.
    """
    if isinstance(obj, (Point, MultiPoint, LineString, Polygon, MultiPolygon)):
        geom = obj
    else:
        if not isinstance(obj, Mapping):
            raise InvalidGeometryError(
                "Geometry must be a GeoJSON mapping", field="geometry", got=type(obj).__name__
            )
        if obj.get("type") == "Feature":
            obj = obj.get("geometry") or {}
        kind = obj.get("type")
        if kind not in SUPPORTED_GEOMETRY_TYPES:
            raise InvalidGeometryError(
                f"Unsupported geometry type: {kind!r}",
                field="geometry",
                expected=", ".join(SUPPORTED_GEOMETRY_TYPES),
                got=str(kind),
            )
        try:
            geom = shape(obj)
        except (ValueError, TypeError, IndexError, AttributeError, ShapelyError) as err:
            raise InvalidGeometryError(f"Malformed {kind} coordinates: {err}", field="geometry") from err

    if geom.is_empty:
        raise InvalidGeometryError("Geometry is empty", field="geometry", got=geom.geom_type)
    return geom


# =============================================================================
# Building massing
# =============================================================================


@dataclass(frozen=True)
class BuildingMass:
    """
    Extruded building footprint used as an obstruction.

    Heights share the terrain's vertical datum: ``base_height`` is the
    elevation of the footprint base and ``top_height`` the roof elevation.
    Buildings are obstructions only; they are not themselves analyzed.

    Attributes:
        footprint: Ordered ring of (x, y) planar points in meters.
        base_height: Base elevation in meters.
        top_height: Roof elevation in meters.
        id: Optional identifier (used for facade exposure results).
    """

    footprint: tuple[tuple[float, float], ...]
    base_height: float
    top_height: float
    id: str | None = None
    _polygon: Polygon = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        ring = tuple((float(p[0]), float(p[1])) for p in self.footprint)
        object.__setattr__(self, "footprint", ring)
        if len(set(ring)) < 3:
            raise InvalidGeometryError(
                "Building footprint needs at least 3 distinct points",
                field="footprint",
                got=f"{len(set(ring))} points",
            )
        if self.top_height < self.base_height:
            raise InvalidGeometryError(
                f"Building top ({self.top_height}) below its base ({self.base_height})",
                field="top_height",
            )
        polygon = Polygon(ring)
        if not polygon.is_valid or polygon.area <= 0:
            raise InvalidGeometryError("Building footprint is not a valid polygon", field="footprint")
        object.__setattr__(self, "_polygon", polygon)

    @property
    def height(self) -> float:
        return self.top_height - self.base_height

    @property
    def polygon(self) -> Polygon:
        return self._polygon

    @classmethod
    def extruded(
        cls,
        footprint: Sequence[Sequence[float]],
        height: float,
        base_height: float = 0.0,
        id: str | None = None,
    ) -> BuildingMass:
        """Building rising ``height`` meters from ``base_height``."""
        return cls(
            footprint=tuple(tuple(p) for p in footprint),
            base_height=base_height,
            top_height=base_height + height,
            id=id,
        )

    @classmethod
    def from_geojson(
        cls,
        feature: Mapping[str, Any],
        projection: LocalProjection | None = None,
        default_height: float | None = None,
        base_height: float = 0.0,
    ) -> list[BuildingMass]:
        """
        Build masses from a GeoJSON Polygon/MultiPolygon feature.

        Args:
            feature: Feature (or bare geometry) with lng/lat coordinates when
                ``projection`` is given, planar meters otherwise.
            projection: Converts lng/lat rings into the local planar frame.
            default_height: Height used when the feature has no ``height``
                property.
            base_height: Base elevation of the footprint.

        Returns:
            One BuildingMass per polygon part (holes are ignored).

        Raises:
            InvalidGeometryError: Non-polygonal geometry or no usable height.
        """
        geom = parse_geometry(feature)
        if not isinstance(geom, (Polygon, MultiPolygon)):
            raise InvalidGeometryError(
                f"Building footprint must be polygonal, got {geom.geom_type}",
                field="footprint",
                expected="Polygon or MultiPolygon",
                got=geom.geom_type,
            )

        properties = (feature.get("properties") or {}) if isinstance(feature, Mapping) else {}
        height = properties.get("height", default_height)
        if height is None:
            raise InvalidGeometryError(
                "Building has no height and no default_height was given", field="height"
            )
        feature_id = feature.get("id") if isinstance(feature, Mapping) else None

        parts = list(geom.geoms) if isinstance(geom, MultiPolygon) else [geom]
        masses = []
        for i, part in enumerate(parts):
            ring = list(part.exterior.coords)
            if projection is not None:
                ring = projection.project_ring(ring)
            part_id = None
            if feature_id is not None:
                part_id = str(feature_id) if len(parts) == 1 else f"{feature_id}-{i}"
            masses.append(cls.extruded(ring, float(height), base_height=base_height, id=part_id))
        return masses


# =============================================================================
# Terrain surfaces
# =============================================================================


class TerrainSurface:
    """Continuous ground surface that can be sampled at planar points."""

    def sample(self, x: NDArray[np.floating], y: NDArray[np.floating]) -> NDArray[np.float64]:
        """Ground elevation at each (x, y); output has the shape of ``x``."""
        raise NotImplementedError


@dataclass(frozen=True)
class FlatTerrain(TerrainSurface):
    """Level ground at a single elevation."""

    elevation: float = 0.0

    def sample(self, x, y):
        return np.full(np.shape(x), float(self.elevation), dtype=np.float64)


@dataclass(frozen=True, eq=False)
class RasterTerrain(TerrainSurface):
    """
    Gridded DEM covering ``bounds``.

    ``heights`` is north-up (row 0 at ``bounds.max_y``), the usual GeoTIFF
    layout. Samples are bilinear between pixel centers and clamped to the
    outermost centers beyond them.
    """

    heights: NDArray[np.floating]
    bounds: BoundingRect

    def __post_init__(self):
        arr = np.asarray(self.heights, dtype=np.float64)
        if arr.ndim != 2 or arr.size == 0:
            raise InvalidGeometryError(
                "DEM must be a non-empty 2D array", field="terrain", expected="2D array", got=str(arr.shape)
            )
        if not np.all(np.isfinite(arr)):
            raise InvalidGeometryError("DEM contains NaN or infinite values", field="terrain")
        arr = arr.copy()
        arr.flags.writeable = False
        object.__setattr__(self, "heights", arr)

    def sample(self, x, y):
        rows, cols = self.heights.shape
        px = self.bounds.width / cols
        py = self.bounds.height / rows
        xs = self.bounds.min_x + (np.arange(cols) + 0.5) * px
        # Flip to ascending y for the interpolator
        ys = self.bounds.min_y + (np.arange(rows) + 0.5) * py
        values = self.heights[::-1, :]

        qx = np.clip(np.asarray(x, dtype=np.float64), xs[0], xs[-1])
        qy = np.clip(np.asarray(y, dtype=np.float64), ys[0], ys[-1])

        if rows == 1 and cols == 1:
            return np.full(qx.shape, values[0, 0])
        if rows == 1:
            return np.interp(qx, xs, values[0, :])
        if cols == 1:
            return np.interp(qy, ys, values[:, 0])

        interpolator = RegularGridInterpolator((ys, xs), values, method="linear")
        points = np.column_stack([qy.ravel(), qx.ravel()])
        return interpolator(points).reshape(qx.shape)


@dataclass(frozen=True, eq=False)
class PointTerrain(TerrainSurface):
    """
    Scattered elevation samples, e.g. the vertices of a terrain mesh.

    Linear interpolation inside the convex hull of the samples, nearest
    sample outside it.

    Attributes:
        points: (N, 3) array of x, y, z in the local planar frame.
    """

    points: NDArray[np.floating]

    def __post_init__(self):
        arr = np.asarray(self.points, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] != 3 or arr.shape[0] == 0:
            raise InvalidGeometryError(
                "Terrain points must be an (N, 3) array", field="terrain", expected="(N, 3)", got=str(arr.shape)
            )
        if not np.all(np.isfinite(arr)):
            raise InvalidGeometryError("Terrain points contain NaN or infinite values", field="terrain")
        arr = arr.copy()
        arr.flags.writeable = False
        object.__setattr__(self, "points", arr)

    def sample(self, x, y):
        qx = np.asarray(x, dtype=np.float64)
        qy = np.asarray(y, dtype=np.float64)
        xy = self.points[:, :2]
        z = self.points[:, 2]
        query = (qx.ravel(), qy.ravel())

        nearest = griddata(xy, z, query, method="nearest")
        if len(self.points) < 3 or _is_collinear(xy):
            return nearest.reshape(qx.shape)

        linear = griddata(xy, z, query, method="linear")
        return np.where(np.isnan(linear), nearest, linear).reshape(qx.shape)


def _is_collinear(xy: NDArray[np.floating]) -> bool:
    centered = xy - xy.mean(axis=0)
    return np.linalg.matrix_rank(centered, tol=1e-9) < 2


def terrain_from_geojson(
    obj: Mapping[str, Any],
    projection: LocalProjection | None = None,
) -> PointTerrain:
    """
    Ingest elevation samples from a GeoJSON FeatureCollection or geometry.

    Each Point/MultiPoint contributes its z coordinate, or the feature's
    ``elevation`` property when coordinates are 2D.

    Raises:
        InvalidGeometryError: Unsupported geometry kinds or missing elevations.
    """
    features = obj.get("features") if obj.get("type") == "FeatureCollection" else [obj]
    samples: list[tuple[float, float, float]] = []
    for feature in features or []:
        geom = parse_geometry(feature)
        if not isinstance(geom, (Point, MultiPoint)):
            raise InvalidGeometryError(
                f"Terrain samples must be points, got {geom.geom_type}",
                field="terrain",
                expected="Point or MultiPoint",
                got=geom.geom_type,
            )
        properties = feature.get("properties") or {}
        points = list(geom.geoms) if isinstance(geom, MultiPoint) else [geom]
        for point in points:
            if point.has_z:
                z = point.z
            elif "elevation" in properties:
                z = float(properties["elevation"])
            else:
                raise InvalidGeometryError("Terrain point has no elevation", field="terrain")
            x, y = point.x, point.y
            if projection is not None:
                x, y = projection.to_local(latitude=y, longitude=x)
            samples.append((x, y, z))

    if not samples:
        raise InvalidGeometryError("No terrain samples found", field="terrain")
    return PointTerrain(points=np.array(samples))
