from __future__ import annotations

from collections.abc import Sequence

from .exceptions import RingTooShortError, ZeroAreaRingError

# A ring needs three distinct corners and a closing point.
MIN_RING_POINTS = 4


def signed_area(
    flat_coords: Sequence[float],
    start: int,
    end: int,
    stride: int,
    fast: bool = False,
) -> float:
    """Return the signed area enclosed by the ring stored between the flat
    buffer offsets start and end, using the linear time shoelace formula.
    A value >= 0 indicates a counter-clockwise oriented ring.
    Only the X and Y components are used, Z and M values are ignored.
    The edge from the last point back to the first is included, so a ring
    that is not explicitly closed is measured as if it were.
    A faster version is possible by setting 'fast' to True, which returns
    2x the area, e.g. if you're only interested in the sign of the area.
    """
    area2 = 0.0
    x0, y0 = flat_coords[end - stride], flat_coords[end - stride + 1]
    for i in range(start, end, stride):
        x1, y1 = flat_coords[i], flat_coords[i + 1]
        area2 += x0 * y1 - x1 * y0
        x0, y0 = x1, y1
    if fast:
        return area2

    return area2 / 2.0


def is_cw(flat_coords: Sequence[float], start: int, end: int, stride: int) -> bool:
    """Returns True if a polygon ring has clockwise orientation, determined
    by a negatively signed area.
    """
    return signed_area(flat_coords, start, end, stride, fast=True) < 0


def organize_polygon_rings(
    flat_coords: Sequence[float], ends: Sequence[int], stride: int
) -> list[list[int]]:
    """Organize the rings of a shapefile polygon into one or more polygons
    with holes, returned as groups of ring ends (endss).

    The shapefile format does not flag holes explicitly: exterior rings run
    clockwise and holes counter-clockwise. The first ring always opens a
    polygon. After that, every clockwise ring opens a new polygon and every
    counter-clockwise ring is a hole of the polygon opened last.

    Rings with fewer than four points, or that enclose no area, raise
    a RingError.
    """
    endss: list[list[int]] = []
    start = 0
    for i, end in enumerate(ends):
        num_points = (end - start) // stride
        if num_points < MIN_RING_POINTS:
            raise RingTooShortError(
                f"Ring {i} has {num_points} points, at least {MIN_RING_POINTS} are required"
            )
        area2 = signed_area(flat_coords, start, end, stride, fast=True)
        if area2 == 0:
            raise ZeroAreaRingError(f"Ring {i} has zero area")
        if not endss or area2 < 0:
            # exterior
            endss.append([end])
        else:
            # hole
            endss[-1].append(end)
        start = end
    return endss
