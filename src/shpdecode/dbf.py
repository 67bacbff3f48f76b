"""
Decoding of dBase III tables (.dbf), the attribute half of a shapefile.

Xbase-related code borrows heavily from ActiveState Python Cookbook Recipe
362715 by Raymond Hettinger.

See http://web.archive.org/web/20150323061445/http://ulisse.elettra.trieste.it/services/doc/dbase/DBFstruct.htm
and https://www.clicketyclick.dk/databases/xbase/format/dbf.html
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Iterator
from datetime import date
from struct import Struct
from typing import NamedTuple, Optional

from . import constants
from .classes import _Record
from .constants import (
    DBF_DBT_FLAG,
    DBF_EOF_MARKER,
    DBF_FIELD_DESCRIPTOR_SIZE,
    DBF_HEADER_SIZE,
    DBF_HEADER_TERMINATOR,
    DBF_MEMO_FLAG,
    DBF_RECORD_DELETED,
    DBF_RECORD_PRESENT,
    DBF_VERSION,
    DBF_VERSION_MASK,
)
from .exceptions import (
    DBFFieldError,
    ShapefileException,
    ShapefileFormatError,
    ShapefileLimitError,
    UnsupportedDBFError,
)
from .helpers import read_exactly
from .types import FieldType, FieldTypeT, ReadableBinStream, RecordValue

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"

# version/flags, last update (YY MM DD), records, header size, record size
_dbf_header = Struct("<4BIHH20x")
# name, type, length, decimal count, work area id, set fields
_field_descriptor = Struct("<11sc4xBB2xB2xB8x")

_numeric_re = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_date_re = re.compile(rb"\d{8}")

_LOGICAL_VALUES: dict[bytes, Optional[bool]] = {
    b"?": None,
    b"F": False,
    b"N": False,
    b"T": True,
    b"Y": True,
    b"f": False,
    b"n": False,
    b"t": True,
    b"y": True,
}


class DBFMemo(bytes):
    """The inline content of a memo (M) field. Memo blocks in a .dbt file
    are not followed."""

    def __repr__(self) -> str:
        return f"DBFMemo({bytes.__repr__(self)})"


class DBFHeader(NamedTuple):
    version: int
    memo: bool
    dbt: bool
    # None if the stored date is not a calendar date
    last_update: Optional[date]
    records: int
    header_size: int
    record_size: int


class DBFFieldDescriptor(NamedTuple):
    name: str
    field_type: FieldTypeT
    length: int
    decimal_count: int
    work_area_id: int
    set_fields: int

    def __repr__(self) -> str:
        return (
            f'DBFFieldDescriptor(name="{self.name}", field_type=FieldType.{self.field_type}, '
            f"length={self.length}, decimal_count={self.decimal_count})"
        )


class ReadDBFOptions(NamedTuple):
    """Limits and decoding choices for read_dbf. Zero limits are unbounded.

    skip_broken_fields decodes a field that cannot be parsed as None instead
    of failing the whole table. charset names the codec used for C fields
    and field names, utf-8 if empty.
    """

    max_header_size: int = 0
    max_record_size: int = 0
    max_records: int = 0
    skip_broken_fields: bool = False
    charset: str = ""
    encoding_errors: str = "strict"


class DBF:
    """A decoded table: header, field descriptors and one entry per record,
    None for records marked as deleted."""

    def __init__(
        self,
        header: DBFHeader,
        field_descriptors: list[DBFFieldDescriptor],
        records: list[Optional[_Record]],
    ):
        self.header = header
        self.field_descriptors = field_descriptors
        self.records = records

    @property
    def field_names(self) -> list[str]:
        return [descriptor.name for descriptor in self.field_descriptors]

    def record(self, i: int) -> _Record | None:
        return self.records[i]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Optional[_Record]]:
        return iter(self.records)

    def __repr__(self) -> str:
        return f"DBF({len(self.field_descriptors)} fields, {len(self.records)} records)"


def parse_dbf_header(data: bytes, options: ReadDBFOptions | None = None) -> DBFHeader:
    if options is None:
        options = ReadDBFOptions()
    if len(data) != DBF_HEADER_SIZE:
        raise ShapefileFormatError(
            f"Invalid .dbf header length: {len(data)} bytes, expected {DBF_HEADER_SIZE}"
        )
    flags, year, month, day, records, header_size, record_size = _dbf_header.unpack(
        data
    )

    version = flags & DBF_VERSION_MASK
    if version != DBF_VERSION:
        raise UnsupportedDBFError(f"{version}: unsupported .dbf version")
    memo = flags & DBF_MEMO_FLAG == DBF_MEMO_FLAG
    if memo:
        raise UnsupportedDBFError("Memo .dbf files are not supported")
    dbt = flags & DBF_DBT_FLAG == DBF_DBT_FLAG
    if dbt:
        raise UnsupportedDBFError(".dbf files with a .dbt memo file are not supported")

    try:
        last_update: date | None = date(1900 + year, month, day)
    except ValueError:
        last_update = None

    if options.max_records and records > options.max_records:
        raise ShapefileLimitError(
            f"Too many records: {records}, the maximum is {options.max_records}"
        )
    if options.max_header_size and header_size > options.max_header_size:
        raise ShapefileLimitError(
            f"Header too large: {header_size}, the maximum is {options.max_header_size}"
        )
    if options.max_record_size and record_size > options.max_record_size:
        raise ShapefileLimitError(
            f"Record too large: {record_size}, the maximum is {options.max_record_size}"
        )

    return DBFHeader(
        version, memo, dbt, last_update, records, header_size, record_size
    )


def parse_field_descriptor(
    data: bytes, charset: str = DEFAULT_CHARSET, errors: str = "strict"
) -> DBFFieldDescriptor:
    encoded_name, encoded_type, length, decimal_count, work_area_id, set_fields = (
        _field_descriptor.unpack(data)
    )
    try:
        name = encoded_name.rstrip(b"\x00").decode(charset, errors)
    except UnicodeDecodeError as e:
        raise ShapefileFormatError(f"{encoded_name!r}: invalid field name: {e}") from e

    field_type = encoded_type.decode("ascii", "replace")
    if field_type not in FieldType.__members__:
        raise ShapefileFormatError(f"{encoded_type!r}: invalid field type")

    return DBFFieldDescriptor(
        name, field_type, length, decimal_count, work_area_id, set_fields  # type: ignore[arg-type]
    )


def parse_field(
    descriptor: DBFFieldDescriptor,
    data: bytes,
    charset: str = DEFAULT_CHARSET,
    errors: str = "strict",
) -> RecordValue:
    """Decodes the raw bytes of one field value. Raises DBFFieldError if
    the bytes are not a valid value of the field's type."""
    typ = descriptor.field_type

    if typ == FieldType.C:
        try:
            return data.rstrip(b"\x00").strip().decode(charset, errors)
        except UnicodeDecodeError as e:
            raise DBFFieldError(f"{data!r}: invalid character data: {e}") from e

    if typ == FieldType.D:
        # dbf date field has no official null value
        # but can check for all hex null-chars, all spaces, or all 0s (QGIS null)
        if not data.strip(b"\x00 0"):
            return None
        if not _date_re.fullmatch(data):
            raise DBFFieldError(f"{data!r}: invalid date")
        try:
            return date(int(data[:4]), int(data[4:6]), int(data[6:8]))
        except ValueError as e:
            raise DBFFieldError(f"{data!r}: invalid date: {e}") from e

    if typ == FieldType.N or typ == FieldType.F:
        # number stored as a string, right justified, and padded with blanks
        text = data.rstrip(b"\x00").strip()
        if not text or not text.strip(b"*"):
            # empty, or QGIS NULL (all '*' chars)
            return None
        if not _numeric_re.fullmatch(text):
            raise DBFFieldError(f"{text!r}: invalid numeric")
        if b"." in text or b"e" in text or b"E" in text:
            return float(text)
        return int(text)

    if typ == FieldType.L:
        try:
            return _LOGICAL_VALUES[data]
        except KeyError:
            raise DBFFieldError(f"{data!r}: invalid logical") from None

    if typ == FieldType.M:
        return DBFMemo(data.rstrip(b"\x00").strip())

    raise DBFFieldError(f"{typ}: unsupported field type")


def _lookup_charset(charset: str) -> str:
    try:
        return codecs.lookup(charset).name
    except LookupError as e:
        raise ShapefileException(f"{charset}: unknown charset") from e


def _lookup_encoding_errors(errors: str) -> str:
    try:
        codecs.lookup_error(errors)
    except LookupError as e:
        raise ShapefileException(f"{errors}: unknown encoding error handler") from e
    return errors


def read_dbf(f: ReadableBinStream, options: ReadDBFOptions | None = None) -> DBF:
    """Reads a whole .dbf table from the start of stream f."""
    if options is None:
        options = ReadDBFOptions()
    charset = _lookup_charset(options.charset or DEFAULT_CHARSET)
    errors = _lookup_encoding_errors(options.encoding_errors)

    header = parse_dbf_header(read_exactly(f, DBF_HEADER_SIZE), options)

    field_descriptors: list[DBFFieldDescriptor] = []
    consumed = DBF_HEADER_SIZE
    while True:
        first = read_exactly(f, 1)
        consumed += 1
        if first == DBF_HEADER_TERMINATOR:
            break
        if options.max_header_size and consumed > options.max_header_size:
            raise ShapefileLimitError(
                f"Header too large: more than {options.max_header_size} bytes of "
                "field descriptors"
            )
        data = first + read_exactly(f, DBF_FIELD_DESCRIPTOR_SIZE - 1)
        consumed += DBF_FIELD_DESCRIPTOR_SIZE - 1
        try:
            field_descriptors.append(parse_field_descriptor(data, charset, errors))
        except ShapefileException as e:
            raise e.__class__(f"Field {len(field_descriptors)}: {e}") from e

    # The deletion flag takes the first byte of every record
    fields_size = 1 + sum(descriptor.length for descriptor in field_descriptors)
    if fields_size != header.record_size:
        raise ShapefileFormatError(
            f"Invalid record size {header.record_size}: the fields and deletion "
            f"flag add up to {fields_size}"
        )

    if header.header_size > consumed:
        logger.debug(
            "Skipping %d bytes of .dbf header padding", header.header_size - consumed
        )
        read_exactly(f, header.header_size - consumed)

    field_positions = {
        descriptor.name: i for i, descriptor in enumerate(field_descriptors)
    }
    records: list[Optional[_Record]] = []
    for i in range(header.records):
        try:
            data = read_exactly(f, header.record_size)
        except ShapefileException as e:
            raise e.__class__(f"Record {i}: {e}") from e

        deletion_flag = data[:1]
        if deletion_flag == DBF_RECORD_DELETED:
            records.append(None)
            continue
        if deletion_flag != DBF_RECORD_PRESENT:
            raise ShapefileFormatError(f"Record {i}: {data[0]}: invalid deletion flag")

        values: list[RecordValue] = []
        offset = 1
        for descriptor in field_descriptors:
            field_data = data[offset : offset + descriptor.length]
            offset += descriptor.length
            try:
                value = parse_field(descriptor, field_data, charset, errors)
            except DBFFieldError as e:
                if not options.skip_broken_fields:
                    raise DBFFieldError(
                        f"Record {i}: field {descriptor.name}: {e}"
                    ) from e
                if constants.VERBOSE:
                    logger.warning(
                        "Record %d: field %s: %s. Decoded as None.",
                        i,
                        descriptor.name,
                        e,
                    )
                value = None
            values.append(value)
        records.append(_Record(field_positions, values, oid=i))

    marker = f.read(1)
    if not marker:
        logger.debug("No end of file marker after the %d .dbf records", len(records))
    elif marker != DBF_EOF_MARKER:
        raise ShapefileFormatError(f"{marker[0]}: invalid end of file marker")

    logger.debug(
        "Read %d records of %d fields from .dbf", len(records), len(field_descriptors)
    )
    return DBF(header, field_descriptors, records)
