from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import NamedTuple, Optional

from .classes import Shapes
from .constants import HEADER_SIZE, NULL, RECORD_HEADER_SIZE, SHAPETYPE_LOOKUP
from .cursor import _ByteCursor
from .exceptions import (
    ShapefileException,
    ShapefileFormatError,
    ShapefileLimitError,
)
from .geometric_calculations import organize_polygon_rings
from .header import ShxHeader, check_shape_type, read_shx_header
from .helpers import _Array, read_exactly, stream_length, unpack_2_uint32_be
from .shapes import (
    LAYOUT_FROM_SHAPETYPE,
    Bounds,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Point_shapeTypes,
    Polyline_shapeTypes,
    MultiPoint_shapeTypes,
    Shape,
    _CanHaveParts_shapeTypes,
)
from .types import ReadableBinStream, ReadSeekableBinStream

logger = logging.getLogger(__name__)


class ReadSHPOptions(NamedTuple):
    """Limits applied while decoding .shp records. Zero means unbounded,
    which leaves memory and CPU use up to the input."""

    max_parts: int = 0
    max_points: int = 0
    max_record_size: int = 0


class SHPRecord(NamedTuple):
    number: int
    content_length: int
    shape_type: int
    # None for NULL and single point records
    bounds: Optional[Bounds]
    # None for NULL records
    geom: Optional[Shape]

    @property
    def shape_type_name(self) -> str:
        return SHAPETYPE_LOOKUP[self.shape_type]


class SHP:
    """The header and all the records of a .shp file."""

    def __init__(self, header: ShxHeader, records: list[SHPRecord]):
        self.header = header
        self.records = records

    @property
    def shape_type(self) -> int:
        return self.header.shape_type

    @property
    def byte_length(self) -> int:
        """The file length implied by the decoded records."""
        return HEADER_SIZE + sum(
            RECORD_HEADER_SIZE + record.content_length for record in self.records
        )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[SHPRecord]:
        return iter(self.records)

    def record(self, i: int) -> Shape | None:
        """Returns the geometry of the ith record."""
        return self.records[i].geom

    def shapes(self) -> Shapes:
        return Shapes(record.geom for record in self.records)

    def __repr__(self) -> str:
        return f"SHP({self.header.shape_type_name}, {len(self.records)} records)"


def parse_shp_record(
    number: int, content: bytes, options: ReadSHPOptions | None = None
) -> SHPRecord:
    """Decodes the content of a single .shp record."""
    if options is None:
        options = ReadSHPOptions()

    content_length = len(content)
    if content_length < 4:
        raise ShapefileFormatError(f"Content length too short: {content_length}")

    cursor = _ByteCursor(content)
    shape_type = cursor.read_uint32()
    check_shape_type(shape_type)
    expected_content_length = 4

    if shape_type == NULL:
        if content_length != expected_content_length:
            raise ShapefileFormatError(
                f"Invalid content length {content_length} for a NULL record, "
                f"expected {expected_content_length}"
            )
        return SHPRecord(number, content_length, NULL, None, None)

    layout = LAYOUT_FROM_SHAPETYPE[shape_type]
    stride = layout.stride

    if shape_type in Point_shapeTypes:
        expected_content_length += 8 * stride
        if content_length != expected_content_length:
            raise ShapefileFormatError(
                f"Invalid content length {content_length} for a "
                f"{SHAPETYPE_LOOKUP[shape_type]} record, expected {expected_content_length}"
            )
        point_coords = cursor.read_float64s(stride)
        if cursor.error is not None:
            raise cursor.error
        return SHPRecord(
            number, content_length, shape_type, None, Point(layout, point_coords)
        )

    xmin, ymin = cursor.read_float64_pair()
    xmax, ymax = cursor.read_float64_pair()
    expected_content_length += 8 * 4

    num_parts = 0
    if shape_type in _CanHaveParts_shapeTypes:
        num_parts = cursor.read_uint32()
        if cursor.error is not None:
            raise cursor.error
        if num_parts == 0:
            raise ShapefileFormatError("0: invalid number of parts")
        if options.max_parts and num_parts > options.max_parts:
            raise ShapefileLimitError(
                f"Too many parts: {num_parts}, the maximum is {options.max_parts}"
            )
        expected_content_length += 4 + 4 * num_parts

    num_points = cursor.read_uint32()
    if cursor.error is not None:
        raise cursor.error
    if options.max_points and num_points > options.max_points:
        raise ShapefileLimitError(
            f"Too many points: {num_points}, the maximum is {options.max_points}"
        )
    expected_content_length += 4 + 8 * 2 * num_points
    if layout.z_index is not None:
        expected_content_length += 8 * 2 + 8 * num_points
    if layout.m_index is not None:
        expected_content_length += 8 * 2 + 8 * num_points

    if content_length != expected_content_length:
        raise ShapefileFormatError(
            f"Invalid content length {content_length} for a {SHAPETYPE_LOOKUP[shape_type]} "
            f"record with {num_parts} parts and {num_points} points, "
            f"expected {expected_content_length}"
        )

    ends: list[int] = []
    if num_parts:
        ends = cursor.read_ends(stride, num_parts, num_points)

    flat_coords = _Array[float]("d", bytes(8 * stride * num_points))
    cursor.read_xys(flat_coords, num_points, stride)

    # On disk the Z block always comes before the M block
    zbox = mbox = None
    if layout.z_index is not None:
        zbox = cursor.read_float64_pair()
        cursor.read_ordinates(flat_coords, num_points, stride, layout.z_index)
    if layout.m_index is not None:
        mbox = cursor.read_float64_pair()
        cursor.read_ordinates(flat_coords, num_points, stride, layout.m_index)

    if cursor.error is not None:
        raise cursor.error

    bounds = Bounds.from_extents(layout, (xmin, ymin, xmax, ymax), zbox, mbox)

    geom: Shape
    if shape_type in MultiPoint_shapeTypes:
        geom = MultiPoint(layout, flat_coords)
    elif shape_type in Polyline_shapeTypes:
        geom = MultiLineString(layout, flat_coords, ends)
    else:
        endss = organize_polygon_rings(flat_coords, ends, stride)
        geom = MultiPolygon(layout, flat_coords, endss)

    return SHPRecord(number, content_length, shape_type, bounds, geom)


def read_shp_record(
    f: ReadableBinStream, options: ReadSHPOptions | None = None
) -> SHPRecord | None:
    """Reads the next record from a .shp stream. Returns None if the stream
    ends cleanly before the record starts."""
    record_header = f.read(RECORD_HEADER_SIZE)
    if not record_header:
        return None
    if len(record_header) < RECORD_HEADER_SIZE:
        record_header += read_exactly(f, RECORD_HEADER_SIZE - len(record_header))

    number, content_length_words = unpack_2_uint32_be(record_header)
    # Convert from num of 16 bit words, to 8 bit bytes
    content_length = 2 * content_length_words
    if content_length < 4:
        raise ShapefileFormatError(f"Content length too short: {content_length}")
    if options is not None and options.max_record_size:
        if content_length > options.max_record_size:
            raise ShapefileLimitError(
                f"Content length too large: {content_length}, "
                f"the maximum is {options.max_record_size}"
            )

    content = read_exactly(f, content_length)
    return parse_shp_record(number, content, options)


def iter_shp_records(
    f: ReadableBinStream, options: ReadSHPOptions | None = None
) -> Iterator[SHPRecord]:
    """Returns a generator of the records of a .shp stream positioned just
    after its header. Record numbers must count up from 1 without gaps."""
    expected_number = 1
    while True:
        try:
            record = read_shp_record(f, options)
        except ShapefileException as e:
            raise e.__class__(f"Record {expected_number}: {e}") from e
        if record is None:
            return
        if record.number != expected_number:
            raise ShapefileFormatError(
                f"Record {expected_number}: invalid record number {record.number}"
            )
        yield record
        expected_number += 1


def read_shp(
    f: ReadSeekableBinStream,
    file_length: int | None = None,
    options: ReadSHPOptions | None = None,
) -> SHP:
    """Reads a whole .shp file from the start of stream f. If file_length is
    not given, it is found by seeking to the end of the stream."""
    if file_length is None:
        file_length = stream_length(f)
    header = read_shx_header(f, file_length)
    records = list(iter_shp_records(f, options))
    logger.debug(
        "Read %d %s records from .shp", len(records), header.shape_type_name
    )
    return SHP(header, records)
