from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, TypedDict, Union

from .exceptions import GeoJSON_Error
from .types import Coord, Coords

if TYPE_CHECKING:
    from .shapes import Layout


class GeoJSONPoint(TypedDict):
    type: Literal["Point"]
    # RFC7946 only requires: "A position is an array of numbers.  There MUST be two or more
    # elements.  " Measures have no place in a position, so only X, Y and Z are emitted.
    coordinates: Coord


class GeoJSONMultiPoint(TypedDict):
    type: Literal["MultiPoint"]
    coordinates: Coords


class GeoJSONLineString(TypedDict):
    type: Literal["LineString"]
    # "Two or more positions" not enforced by type checker
    # https://datatracker.ietf.org/doc/html/rfc7946#section-3.1.4
    coordinates: Coords


class GeoJSONMultiLineString(TypedDict):
    type: Literal["MultiLineString"]
    coordinates: list[Coords]


class GeoJSONPolygon(TypedDict):
    type: Literal["Polygon"]
    # Other requirements for Polygon not enforced by type checker
    # https://datatracker.ietf.org/doc/html/rfc7946#section-3.1.6
    coordinates: list[Coords]


class GeoJSONMultiPolygon(TypedDict):
    type: Literal["MultiPolygon"]
    coordinates: list[list[Coords]]


GeoJSONHomogeneousGeometryObject = Union[
    GeoJSONPoint,
    GeoJSONMultiPoint,
    GeoJSONLineString,
    GeoJSONMultiLineString,
    GeoJSONPolygon,
    GeoJSONMultiPolygon,
]


class GeoJSONGeometryCollection(TypedDict):
    type: Literal["GeometryCollection"]
    geometries: list[GeoJSONHomogeneousGeometryObject]


# RFC7946 3.1
GeoJSONObject = Union[GeoJSONHomogeneousGeometryObject, GeoJSONGeometryCollection]


class GeoJSONFeature(TypedDict):
    type: Literal["Feature"]
    properties: (
        dict[str, Any] | None
    )  # RFC7946 3.2 "(any JSON object or a JSON null value)"
    geometry: GeoJSONObject | None


class GeoJSONFeatureCollection(TypedDict):
    type: Literal["FeatureCollection"]
    features: list[GeoJSONFeature]


class GeoJSONFeatureCollectionWithBBox(GeoJSONFeatureCollection):
    bbox: list[float]


class GeoJSONSerisalizableShape:
    """Mixin providing __geo_interface__ for the decoded geometries.

    Subclasses set geom_type and implement coords(). Single part line and
    polygon geometries are returned as a LineString or Polygon, as most
    consumers expect.
    """

    geom_type: str
    layout: Layout

    def coords(self) -> Any:
        raise NotImplementedError

    def _position(self, coord: Coord) -> Coord:
        # drop any m value
        return coord[:3] if self.layout.z_index is not None else coord[:2]

    @property
    def __geo_interface__(self) -> GeoJSONHomogeneousGeometryObject:
        if self.geom_type == "Point":
            return {"type": "Point", "coordinates": self._position(self.coords())}

        if self.geom_type == "MultiPoint":
            # an empty coordinate list stands in for an 'empty' geometry,
            # the geojson spec has no proper null-geometry type
            return {
                "type": "MultiPoint",
                "coordinates": [self._position(p) for p in self.coords()],
            }

        if self.geom_type == "MultiLineString":
            lines = [[self._position(p) for p in line] for line in self.coords()]
            if len(lines) == 1:
                # linestring
                return {"type": "LineString", "coordinates": lines[0]}
            return {"type": "MultiLineString", "coordinates": lines}

        if self.geom_type == "MultiPolygon":
            polys = [
                [[self._position(p) for p in ring] for ring in poly]
                for poly in self.coords()
            ]
            if len(polys) == 1:
                return {"type": "Polygon", "coordinates": polys[0]}
            return {"type": "MultiPolygon", "coordinates": polys}

        raise GeoJSON_Error(
            f'Geometry type "{self.geom_type}" cannot be represented as GeoJSON.'
        )
