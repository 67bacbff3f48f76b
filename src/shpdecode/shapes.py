from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import NamedTuple, Optional

from .constants import (
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NODATA,
    POINT,
    POINTM,
    POINTZ,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
)
from .geojson import GeoJSONSerisalizableShape
from .helpers import _Array
from .types import BBox, Coord, Coords, MBox, ZBox


class Layout(NamedTuple):
    """The components of each point, and where Z and M sit in a flat
    coordinate buffer."""

    name: str
    stride: int
    z_index: Optional[int]
    m_index: Optional[int]

    def __repr__(self) -> str:
        return self.name


XY = Layout("XY", 2, None, None)
XYM = Layout("XYM", 3, None, 2)
# Z shape types always carry measures too
XYZM = Layout("XYZM", 4, 2, 3)


Point_shapeTypes = frozenset([POINT, POINTM, POINTZ])
MultiPoint_shapeTypes = frozenset([MULTIPOINT, MULTIPOINTM, MULTIPOINTZ])
Polyline_shapeTypes = frozenset([POLYLINE, POLYLINEM, POLYLINEZ])
Polygon_shapeTypes = frozenset([POLYGON, POLYGONM, POLYGONZ])
_CanHaveParts_shapeTypes = Polyline_shapeTypes | Polygon_shapeTypes

LAYOUT_FROM_SHAPETYPE: dict[int, Layout] = {
    POINT: XY,
    POLYLINE: XY,
    POLYGON: XY,
    MULTIPOINT: XY,
    POINTM: XYM,
    POLYLINEM: XYM,
    POLYGONM: XYM,
    MULTIPOINTM: XYM,
    POINTZ: XYZM,
    POLYLINEZ: XYZM,
    POLYGONZ: XYZM,
    MULTIPOINTZ: XYZM,
}


def nodata(x: float) -> bool:
    """Returns True if x is a no data value."""
    return x <= NODATA


def _normalize_min(x: float) -> float:
    return math.inf if nodata(x) else x


def _normalize_max(x: float) -> float:
    return -math.inf if nodata(x) else x


class Bounds(NamedTuple):
    """An axis aligned bounding box, with one min and one max per layout
    component. No data minimums are held as +inf and no data maximums as
    -inf, so an absent range never contains anything."""

    layout: Layout
    mins: Coord
    maxs: Coord

    @classmethod
    def from_extents(
        cls,
        layout: Layout,
        bbox: BBox,
        zbox: ZBox | None = None,
        mbox: MBox | None = None,
    ) -> Bounds:
        xmin, ymin, xmax, ymax = bbox
        mins = [xmin, ymin]
        maxs = [xmax, ymax]
        if layout.z_index is not None:
            if zbox is None:
                raise ValueError(f"A zbox is required for layout {layout.name}")
            mins.append(zbox[0])
            maxs.append(zbox[1])
        if layout.m_index is not None:
            if mbox is None:
                raise ValueError(f"An mbox is required for layout {layout.name}")
            mins.append(mbox[0])
            maxs.append(mbox[1])
        return cls(
            layout,
            tuple(_normalize_min(v) for v in mins),
            tuple(_normalize_max(v) for v in maxs),
        )

    @property
    def bbox(self) -> BBox:
        return self.mins[0], self.mins[1], self.maxs[0], self.maxs[1]

    @property
    def zbox(self) -> ZBox | None:
        i = self.layout.z_index
        if i is None:
            return None
        return self.mins[i], self.maxs[i]

    @property
    def mbox(self) -> MBox | None:
        i = self.layout.m_index
        if i is None:
            return None
        return self.mins[i], self.maxs[i]

    def __repr__(self) -> str:
        return f"Bounds({self.layout.name}, mins={self.mins}, maxs={self.maxs})"


class Shape(GeoJSONSerisalizableShape):
    """A decoded geometry: a layout and a flat buffer of coordinates,
    ordered by point and then by component."""

    geom_type = "Shape"

    def __init__(self, layout: Layout, flat_coords: Iterable[float]):
        self.layout = layout
        if isinstance(flat_coords, _Array):
            self.flat_coords: _Array[float] = flat_coords
        else:
            self.flat_coords = _Array[float]("d", flat_coords)
        if len(self.flat_coords) % layout.stride:
            raise ValueError(
                f"{len(self.flat_coords)} coordinates do not fit layout {layout.name}"
            )

    @property
    def stride(self) -> int:
        return self.layout.stride

    @property
    def num_points(self) -> int:
        return len(self.flat_coords) // self.layout.stride

    @property
    def z(self) -> Sequence[float] | None:
        """The Z value of every point, or None if the layout has no Z."""
        if self.layout.z_index is None:
            return None
        return self.flat_coords[self.layout.z_index :: self.layout.stride]

    @property
    def m(self) -> Sequence[float] | None:
        """The M value of every point, or None if the layout has no M."""
        if self.layout.m_index is None:
            return None
        return self.flat_coords[self.layout.m_index :: self.layout.stride]

    def _coords(self, start: int, end: int) -> Coords:
        """Points between two offsets of the flat coordinate buffer."""
        stride = self.layout.stride
        flat = self.flat_coords
        return [tuple(flat[i : i + stride]) for i in range(start, end, stride)]

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        assert isinstance(other, Shape)
        return self.layout == other.layout and self.flat_coords == other.flat_coords

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.layout.name}, {self.num_points} points)"


class Point(Shape):
    geom_type = "Point"

    def __init__(self, layout: Layout, flat_coords: Iterable[float]):
        Shape.__init__(self, layout, flat_coords)
        if self.num_points != 1:
            raise ValueError(f"A Point has exactly one point, got {self.num_points}")

    def coords(self) -> Coord:
        return tuple(self.flat_coords)


class MultiPoint(Shape):
    geom_type = "MultiPoint"

    def coords(self) -> Coords:
        return self._coords(0, len(self.flat_coords))

    def __len__(self) -> int:
        return self.num_points


def _check_ends(ends: Sequence[int], stride: int, total: int) -> None:
    previous = 0
    for end in ends:
        if end < previous or end % stride:
            raise ValueError(f"Invalid ends {list(ends)} for stride {stride}")
        previous = end
    if previous != total:
        raise ValueError(f"Last end must be {total}, got {previous}")


class MultiLineString(Shape):
    """One line string per part, delimited by the ends table."""

    geom_type = "MultiLineString"

    def __init__(
        self, layout: Layout, flat_coords: Iterable[float], ends: Sequence[int]
    ):
        Shape.__init__(self, layout, flat_coords)
        _check_ends(ends, layout.stride, len(self.flat_coords))
        self.ends: tuple[int, ...] = tuple(ends)

    @property
    def num_line_strings(self) -> int:
        return len(self.ends)

    def line_string(self, i: int) -> Coords:
        start = self.ends[i - 1] if i > 0 else 0
        return self._coords(start, self.ends[i])

    def coords(self) -> list[Coords]:
        return [self.line_string(i) for i in range(len(self.ends))]

    def __eq__(self, other: object) -> bool:
        result = Shape.__eq__(self, other)
        if result is True:
            assert isinstance(other, MultiLineString)
            return self.ends == other.ends
        return result

    def __repr__(self) -> str:
        return (
            f"MultiLineString({self.layout.name}, {self.num_points} points, "
            f"{self.num_line_strings} parts)"
        )


class MultiPolygon(Shape):
    """Polygons given as groups of ring ends (endss). The first ring of each
    group is the exterior, the rest are its holes. Rings follow each other
    in the flat coordinate buffer, across groups."""

    geom_type = "MultiPolygon"

    def __init__(
        self,
        layout: Layout,
        flat_coords: Iterable[float],
        endss: Sequence[Sequence[int]],
    ):
        Shape.__init__(self, layout, flat_coords)
        if any(not ends for ends in endss):
            raise ValueError("A polygon needs at least one ring")
        _check_ends(
            [end for ends in endss for end in ends],
            layout.stride,
            len(self.flat_coords),
        )
        self.endss: tuple[tuple[int, ...], ...] = tuple(tuple(ends) for ends in endss)

    @property
    def num_polygons(self) -> int:
        return len(self.endss)

    def coords(self) -> list[list[Coords]]:
        polys = []
        start = 0
        for ends in self.endss:
            rings = []
            for end in ends:
                rings.append(self._coords(start, end))
                start = end
            polys.append(rings)
        return polys

    def __eq__(self, other: object) -> bool:
        result = Shape.__eq__(self, other)
        if result is True:
            assert isinstance(other, MultiPolygon)
            return self.endss == other.endss
        return result

    def __repr__(self) -> str:
        return (
            f"MultiPolygon({self.layout.name}, {self.num_points} points, "
            f"{self.num_polygons} polygons)"
        )
