from __future__ import annotations

from struct import Struct
from typing import NamedTuple, Optional

from .constants import (
    FILE_CODE,
    HEADER_SIZE,
    NULL,
    SHAPETYPE_LOOKUP,
    UNSUPPORTED_SHAPETYPES,
    VERSION,
)
from .exceptions import (
    InvalidShapeTypeError,
    ShapefileFormatError,
    ShapefileTruncatedError,
    UnsupportedShapeTypeError,
)
from .helpers import read_exactly
from .shapes import LAYOUT_FROM_SHAPETYPE, Bounds
from .types import ReadableBinStream

_file_code_be = Struct(">I")
_file_length_be = Struct(">I")
_version_and_shape_type_le = Struct("<2I")
_bounds_le = Struct("<8d")


class ShxHeader(NamedTuple):
    """The 100 byte header shared by .shp and .shx files."""

    shape_type: int
    # None for a NULL shapefile
    bounds: Optional[Bounds]

    @property
    def shape_type_name(self) -> str:
        return SHAPETYPE_LOOKUP[self.shape_type]


def check_shape_type(shape_type: int) -> None:
    """Raises unless shape_type is a known and supported shape type."""
    if shape_type not in SHAPETYPE_LOOKUP:
        raise InvalidShapeTypeError(f"{shape_type}: invalid shape type")
    if shape_type in UNSUPPORTED_SHAPETYPES:
        raise UnsupportedShapeTypeError(
            f"{SHAPETYPE_LOOKUP[shape_type]}: unsupported shape type"
        )


def parse_shx_header(data: bytes, file_length: int) -> ShxHeader:
    """Parses the header of a .shp or .shx file whose total size in bytes is
    file_length."""
    if len(data) != HEADER_SIZE:
        raise ShapefileFormatError(
            f"Invalid header length: {len(data)} bytes, expected {HEADER_SIZE}"
        )
    (file_code,) = _file_code_be.unpack_from(data, 0)
    if file_code != FILE_CODE:
        raise ShapefileFormatError(f"{file_code}: invalid file code")
    # File length (16-bit word * 2 = bytes)
    header_file_length = 2 * _file_length_be.unpack_from(data, 24)[0]
    if header_file_length != file_length:
        raise ShapefileFormatError(
            f"Invalid file length: header says {header_file_length} bytes, "
            f"file has {file_length}"
        )
    version, shape_type = _version_and_shape_type_le.unpack_from(data, 28)
    if version != VERSION:
        raise ShapefileFormatError(f"{version}: invalid header version")
    check_shape_type(shape_type)

    if shape_type == NULL:
        return ShxHeader(shape_type, None)

    xmin, ymin, xmax, ymax, zmin, zmax, mmin, mmax = _bounds_le.unpack_from(data, 36)
    bounds = Bounds.from_extents(
        LAYOUT_FROM_SHAPETYPE[shape_type],
        (xmin, ymin, xmax, ymax),
        zbox=(zmin, zmax),
        mbox=(mmin, mmax),
    )
    return ShxHeader(shape_type, bounds)


def read_shx_header(f: ReadableBinStream, file_length: int) -> ShxHeader:
    """Reads the header of a .shp or .shx file from the start of stream f."""
    if file_length < HEADER_SIZE:
        raise ShapefileTruncatedError(
            f"File too short: {file_length} bytes, the header alone is {HEADER_SIZE}"
        )
    return parse_shx_header(read_exactly(f, HEADER_SIZE), file_length)
