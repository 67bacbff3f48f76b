"""
Builders for synthetic .shp, .shx and .dbf files, used by the tests.
"""

# std lib imports
import io
import struct
import zipfile

# Shape type codes, repeated here so the fixtures do not depend on the
# package under test
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

Z_TYPES = {POINTZ, POLYLINEZ, POLYGONZ, MULTIPOINTZ}
M_TYPES = {POINTM, POLYLINEM, POLYGONM, MULTIPOINTM} | Z_TYPES
PARTS_TYPES = {POLYLINE, POLYLINEZ, POLYLINEM, POLYGON, POLYGONZ, POLYGONM}


def shx_header(
    shape_type,
    file_length,
    bbox=(0.0, 0.0, 0.0, 0.0),
    zbox=(0.0, 0.0),
    mbox=(0.0, 0.0),
    file_code=9994,
    version=1000,
):
    """The 100 byte header of a .shp or .shx file."""
    return (
        struct.pack(">7I", file_code, 0, 0, 0, 0, 0, file_length // 2)
        + struct.pack("<2I", version, shape_type)
        + struct.pack("<8d", *bbox, *zbox, *mbox)
    )


def null_content():
    return struct.pack("<I", NULL)


def point_content(shape_type, *coords):
    """Content of a Point record. coords are x, y, [z,] [m] in file order."""
    return struct.pack("<I", shape_type) + struct.pack(f"<{len(coords)}d", *coords)


def _range(values):
    return (min(values), max(values)) if values else (0.0, 0.0)


def multi_content(shape_type, points, parts=None, z=None, m=None, bbox=None):
    """Content of a MultiPoint, PolyLine or Polygon record (and their Z and M
    variants). points are (x, y) pairs, parts the start index of each part,
    z and m one value per point."""
    n = len(points)
    if bbox is None:
        xmin, xmax = _range([p[0] for p in points])
        ymin, ymax = _range([p[1] for p in points])
        bbox = (xmin, ymin, xmax, ymax)
    content = struct.pack("<I", shape_type) + struct.pack("<4d", *bbox)
    if shape_type in PARTS_TYPES:
        parts = [0] if parts is None else parts
        content += struct.pack("<I", len(parts))
    content += struct.pack("<I", n)
    if shape_type in PARTS_TYPES:
        content += struct.pack(f"<{len(parts)}I", *parts)
    for x, y in points:
        content += struct.pack("<2d", x, y)
    if shape_type in Z_TYPES:
        z = [0.0] * n if z is None else z
        content += struct.pack("<2d", *_range(z)) + struct.pack(f"<{n}d", *z)
    if shape_type in M_TYPES:
        m = [0.0] * n if m is None else m
        content += struct.pack("<2d", *_range(m)) + struct.pack(f"<{n}d", *m)
    return content


def shp_record(number, content):
    return struct.pack(">2I", number, len(content) // 2) + content


def shp_file(shape_type, contents, bbox=(0.0, 0.0, 10.0, 10.0), numbers=None):
    """A complete .shp file holding one record per item of contents."""
    if numbers is None:
        numbers = range(1, len(contents) + 1)
    body = b"".join(
        shp_record(number, content) for number, content in zip(numbers, contents)
    )
    return shx_header(shape_type, 100 + len(body), bbox=bbox) + body


def shx_file(shape_type, contents):
    """The .shx index matching shp_file(shape_type, contents)."""
    body = b""
    offset = 100
    for content in contents:
        body += struct.pack(">2I", offset // 2, len(content) // 2)
        offset += 8 + len(content)
    return shx_header(shape_type, 100 + len(body)) + body


def dbf_field(name, field_type, length, decimal_count=0):
    return (
        name.encode("ascii").ljust(11, b"\x00")
        + field_type.encode("ascii")
        + b"\x00" * 4
        + bytes([length, decimal_count])
        + b"\x00" * 14
    )


def dbf_file(
    fields,
    records,
    flags=0x03,
    last_update=(124, 5, 17),
    header_size=None,
    record_size=None,
    padding=b"",
    eof=b"\x1a",
):
    """A complete .dbf file.

    fields is a list of (name, type, length[, decimal_count]) tuples and
    records a list of rows. A row is a list of byte values, padded with
    spaces to their field's length, optionally preceded by a deletion flag
    as a tuple (flag, values).
    """
    descriptors = b"".join(dbf_field(*field) for field in fields)
    if header_size is None:
        header_size = 32 + len(descriptors) + 1 + len(padding)
    if record_size is None:
        record_size = 1 + sum(field[2] for field in fields)
    body = b""
    for row in records:
        if isinstance(row, tuple):
            flag, values = row
        else:
            flag, values = b" ", row
        body += flag
        for field, value in zip(fields, values):
            body += value.ljust(field[2], b" ")
    header = struct.pack(
        "<4BIHH20x", flags, *last_update, len(records), header_size, record_size
    )
    return header + descriptors + b"\r" + padding + body + eof


def zip_archive(members):
    """An in memory zip archive holding members, a dict of name to bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    buffer.seek(0)
    return buffer


# A clockwise square, and counter-clockwise triangle inside it
OUTER_SQUARE = [(0.0, 0.0), (0.0, 4.0), (4.0, 4.0), (4.0, 0.0), (0.0, 0.0)]
INNER_TRIANGLE = [(1.0, 1.0), (2.0, 1.0), (1.0, 2.0), (1.0, 1.0)]
