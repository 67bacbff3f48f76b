from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import NamedTuple

from .constants import HEADER_SIZE, SHX_RECORD_SIZE
from .exceptions import ShapefileFormatError
from .header import ShxHeader, read_shx_header
from .helpers import read_exactly, stream_length, unpack_2_uint32_be
from .types import ReadSeekableBinStream

logger = logging.getLogger(__name__)


class SHXRecord(NamedTuple):
    """Where a .shp record starts, and the length of its content, in bytes."""

    offset: int
    content_length: int


class SHX:
    def __init__(self, header: ShxHeader, records: list[SHXRecord]):
        self.header = header
        self.records = records

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[SHXRecord]:
        return iter(self.records)

    def __getitem__(self, i: int) -> SHXRecord:
        return self.records[i]

    def __repr__(self) -> str:
        return f"SHX({self.header.shape_type_name}, {len(self.records)} records)"


def parse_shx_record(data: bytes) -> SHXRecord:
    offset_words, content_length_words = unpack_2_uint32_be(data)
    return SHXRecord(2 * offset_words, 2 * content_length_words)


def read_shx(f: ReadSeekableBinStream, file_length: int | None = None) -> SHX:
    """Reads a whole .shx file from the start of stream f."""
    if file_length is None:
        file_length = stream_length(f)
    header = read_shx_header(f, file_length)

    body_length = file_length - HEADER_SIZE
    if body_length % SHX_RECORD_SIZE:
        raise ShapefileFormatError(
            f"Invalid .shx length {file_length}: the {body_length} bytes after the "
            f"header are not a whole number of {SHX_RECORD_SIZE} byte entries"
        )
    data = read_exactly(f, body_length)

    records = [
        parse_shx_record(data[i : i + SHX_RECORD_SIZE])
        for i in range(0, body_length, SHX_RECORD_SIZE)
    ]
    logger.debug("Read %d index entries from .shx", len(records))
    return SHX(header, records)
