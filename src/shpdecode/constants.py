from __future__ import annotations

# Module settings
VERBOSE = True

# Constants for shape types
NULL = 0
POINT = 1
POLYLINE = 3
POLYGON = 5
MULTIPOINT = 8
POINTZ = 11
POLYLINEZ = 13
POLYGONZ = 15
MULTIPOINTZ = 18
POINTM = 21
POLYLINEM = 23
POLYGONM = 25
MULTIPOINTM = 28
MULTIPATCH = 31

SHAPETYPE_LOOKUP = {
    NULL: "NULL",
    POINT: "POINT",
    POLYLINE: "POLYLINE",
    POLYGON: "POLYGON",
    MULTIPOINT: "MULTIPOINT",
    POINTZ: "POINTZ",
    POLYLINEZ: "POLYLINEZ",
    POLYGONZ: "POLYGONZ",
    MULTIPOINTZ: "MULTIPOINTZ",
    POINTM: "POINTM",
    POLYLINEM: "POLYLINEM",
    POLYGONM: "POLYGONM",
    MULTIPOINTM: "MULTIPOINTM",
    MULTIPATCH: "MULTIPATCH",
}

# Recognised by the format but not decoded
UNSUPPORTED_SHAPETYPES = frozenset([MULTIPATCH])

# .shp / .shx main file header
HEADER_SIZE = 100
FILE_CODE = 9994
VERSION = 1000
RECORD_HEADER_SIZE = 8
SHX_RECORD_SIZE = 8

# Bounds at or below this value mean "no data".
NODATA = -1e38

# .dbf
DBF_HEADER_SIZE = 32
DBF_FIELD_DESCRIPTOR_SIZE = 32
DBF_VERSION = 3
DBF_VERSION_MASK = 0x07
DBF_MEMO_FLAG = 0x08
DBF_DBT_FLAG = 0x80
DBF_HEADER_TERMINATOR = b"\r"
DBF_EOF_MARKER = b"\x1a"
DBF_RECORD_PRESENT = b" "
DBF_RECORD_DELETED = b"*"
