"""
shpdecode
Provides read support for ESRI Shapefiles: the .shp geometry stream, the
.dbf attribute table, the .shx offset index and the .prj and .cpg files.
Compatible with Python versions >=3.9
"""

from __future__ import annotations

import logging

from .__version__ import __version__
from .classes import ShapeRecord, ShapeRecords, Shapes, _Record
from .constants import (
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NODATA,
    NULL,
    POINT,
    POINTM,
    POINTZ,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
    SHAPETYPE_LOOKUP,
)
from .cpg import CPG, read_cpg
from .dbf import (
    DBF,
    DBFFieldDescriptor,
    DBFHeader,
    DBFMemo,
    ReadDBFOptions,
    parse_dbf_header,
    parse_field,
    read_dbf,
)
from .exceptions import (
    DBFFieldError,
    GeoJSON_Error,
    InvalidShapeTypeError,
    RingError,
    RingTooShortError,
    ShapefileException,
    ShapefileFormatError,
    ShapefileLimitError,
    ShapefileTruncatedError,
    UnsupportedDBFError,
    UnsupportedShapeTypeError,
    ZeroAreaRingError,
)
from .geometric_calculations import is_cw, organize_polygon_rings, signed_area
from .header import ShxHeader, parse_shx_header, read_shx_header
from .prj import PRJ, read_prj
from .reader import (
    ReadShapefileOptions,
    Shapefile,
    read_shapefile,
    read_shapefile_from_files,
    read_zip_archive,
)
from .shapes import (
    LAYOUT_FROM_SHAPETYPE,
    XY,
    XYM,
    XYZM,
    Bounds,
    Layout,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Shape,
)
from .shp import (
    SHP,
    ReadSHPOptions,
    SHPRecord,
    iter_shp_records,
    parse_shp_record,
    read_shp,
    read_shp_record,
)
from .shx import SHX, SHXRecord, parse_shx_record, read_shx
from .types import BBox, Coord, Coords, FieldType, FieldTypeT, MBox, RecordValue, ZBox

__all__ = [
    "__version__",
    "NULL",
    "POINT",
    "POLYLINE",
    "POLYGON",
    "MULTIPOINT",
    "POINTZ",
    "POLYLINEZ",
    "POLYGONZ",
    "MULTIPOINTZ",
    "POINTM",
    "POLYLINEM",
    "POLYGONM",
    "MULTIPOINTM",
    "MULTIPATCH",
    "NODATA",
    "SHAPETYPE_LOOKUP",
    "Layout",
    "XY",
    "XYM",
    "XYZM",
    "LAYOUT_FROM_SHAPETYPE",
    "Bounds",
    "Shape",
    "Point",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "signed_area",
    "is_cw",
    "organize_polygon_rings",
    "ShxHeader",
    "parse_shx_header",
    "read_shx_header",
    "ReadSHPOptions",
    "SHPRecord",
    "SHP",
    "parse_shp_record",
    "read_shp_record",
    "iter_shp_records",
    "read_shp",
    "SHXRecord",
    "SHX",
    "parse_shx_record",
    "read_shx",
    "DBFHeader",
    "DBFFieldDescriptor",
    "DBFMemo",
    "DBF",
    "ReadDBFOptions",
    "parse_dbf_header",
    "parse_field",
    "read_dbf",
    "PRJ",
    "read_prj",
    "CPG",
    "read_cpg",
    "ReadShapefileOptions",
    "Shapefile",
    "read_shapefile",
    "read_shapefile_from_files",
    "read_zip_archive",
    "Shapes",
    "ShapeRecord",
    "ShapeRecords",
    "_Record",
    "BBox",
    "MBox",
    "ZBox",
    "Coord",
    "Coords",
    "FieldType",
    "FieldTypeT",
    "RecordValue",
    "ShapefileException",
    "ShapefileFormatError",
    "InvalidShapeTypeError",
    "UnsupportedShapeTypeError",
    "UnsupportedDBFError",
    "RingError",
    "RingTooShortError",
    "ZeroAreaRingError",
    "ShapefileLimitError",
    "ShapefileTruncatedError",
    "DBFFieldError",
    "GeoJSON_Error",
]

logger = logging.getLogger(__name__)
