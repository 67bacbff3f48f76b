"""
This module tests the grouping of polygon rings by orientation.
"""

# third party imports
import pytest

# our imports
import shpdecode
from shapefile_builders import INNER_TRIANGLE, OUTER_SQUARE


def flatten(*rings):
    return [c for ring in rings for point in ring for c in point]


def test_signed_area():
    """
    Assert that clockwise rings have a negative signed area,
    and counter-clockwise rings a positive one.
    """
    flat = flatten(OUTER_SQUARE)
    assert shpdecode.signed_area(flat, 0, len(flat), 2) == -16.0
    assert shpdecode.signed_area(flat, 0, len(flat), 2, fast=True) == -32.0
    assert shpdecode.is_cw(flat, 0, len(flat), 2)
    flat = flatten(INNER_TRIANGLE)
    assert shpdecode.signed_area(flat, 0, len(flat), 2) == 0.5
    assert not shpdecode.is_cw(flat, 0, len(flat), 2)


def test_signed_area_ignores_z_and_m():
    flat = [c for x, y in OUTER_SQUARE for c in (x, y, 100.0 * x, -y)]
    assert shpdecode.signed_area(flat, 0, len(flat), 4) == -16.0


def test_holes_follow_their_exterior():
    flat = flatten(OUTER_SQUARE, INNER_TRIANGLE, OUTER_SQUARE, INNER_TRIANGLE)
    endss = shpdecode.organize_polygon_rings(flat, [10, 18, 28, 36], 2)
    assert endss == [[10, 18], [28, 36]]


def test_first_ring_is_always_an_exterior():
    """
    Assert that a counter-clockwise first ring still opens a polygon.
    """
    flat = flatten(INNER_TRIANGLE, INNER_TRIANGLE)
    assert shpdecode.organize_polygon_rings(flat, [8, 16], 2) == [[8, 16]]


def test_clockwise_rings_open_new_polygons():
    flat = flatten(OUTER_SQUARE, INNER_TRIANGLE[::-1])
    assert shpdecode.organize_polygon_rings(flat, [10, 18], 2) == [[10], [18]]


def test_degenerate_rings():
    flat = flatten([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (0.0, 0.0)])
    with pytest.raises(shpdecode.ZeroAreaRingError, match="Ring 0"):
        shpdecode.organize_polygon_rings(flat, [8], 2)

    flat = flatten(OUTER_SQUARE, [(0.0, 0.0), (1.0, 0.0), (0.0, 0.0)])
    with pytest.raises(shpdecode.RingTooShortError, match="Ring 1"):
        shpdecode.organize_polygon_rings(flat, [10, 16], 2)
    assert issubclass(shpdecode.RingError, shpdecode.ShapefileFormatError)
