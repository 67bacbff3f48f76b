from __future__ import annotations

import sys
from struct import Struct, unpack_from

from .exceptions import (
    ShapefileException,
    ShapefileFormatError,
    ShapefileTruncatedError,
)
from .helpers import _Array

_uint32_le = Struct("<I")
_float64_le = Struct("<d")
_float64_pair_le = Struct("<2d")


class _ByteCursor:
    """A forward-only cursor over the content of a single record.

    Every read consumes bytes from the front of the buffer. The first read
    that runs out of data (or finds an invalid ends table) stores its
    exception in `error`, and from then on every read returns a zero value
    without looking at the buffer again. This lets a decoder perform a run
    of reads and check `error` once at the end, but nothing read after a
    failure may be trusted, so callers must check `error` before building
    a result.
    """

    __slots__ = ("_data", "_pos", "error")

    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0
        self.error: ShapefileException | None = None

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, size: int) -> int | None:
        """Returns the offset of the next size bytes and moves past them.
        Returns None if the cursor has already failed or too few bytes are left."""
        if self.error is not None:
            return None
        if size > self.remaining:
            self.error = ShapefileTruncatedError(
                f"Unexpected end of data: {size} bytes needed at offset {self._pos}, "
                f"only {self.remaining} left"
            )
            return None
        offset = self._pos
        self._pos += size
        return offset

    def _float64s_at(self, offset: int, n: int) -> _Array[float]:
        values = _Array[float]("d", self._data[offset : offset + 8 * n])
        if sys.byteorder != "little":
            values.byteswap()
        return values

    def read_uint32(self) -> int:
        offset = self._take(4)
        if offset is None:
            return 0
        (value,) = _uint32_le.unpack_from(self._data, offset)
        return value

    def read_float64(self) -> float:
        offset = self._take(8)
        if offset is None:
            return 0.0
        (value,) = _float64_le.unpack_from(self._data, offset)
        return value

    def read_float64_pair(self) -> tuple[float, float]:
        offset = self._take(16)
        if offset is None:
            return 0.0, 0.0
        a, b = _float64_pair_le.unpack_from(self._data, offset)
        return a, b

    def read_float64s(self, n: int) -> _Array[float]:
        offset = self._take(8 * n)
        if offset is None:
            return _Array[float]("d")
        return self._float64s_at(offset, n)

    def read_ordinates(
        self, flat_coords: _Array[float], n: int, stride: int, index: int
    ) -> None:
        """Reads n values into component slot index of each point in flat_coords."""
        offset = self._take(8 * n)
        if offset is None:
            return
        flat_coords[index::stride] = self._float64s_at(offset, n)

    def read_xys(self, flat_coords: _Array[float], n: int, stride: int) -> None:
        """Reads n interleaved X, Y pairs into the first two slots of each point."""
        offset = self._take(16 * n)
        if offset is None:
            return
        xys = self._float64s_at(offset, 2 * n)
        flat_coords[0::stride] = xys[0::2]
        flat_coords[1::stride] = xys[1::2]

    def read_ends(self, stride: int, num_parts: int, num_points: int) -> list[int]:
        """Reads a table of num_parts part start indexes and returns the
        matching ends table, in units of the flat coordinate buffer."""
        if self.error is None and num_parts < 1:
            self.error = ShapefileFormatError(f"{num_parts}: invalid number of parts")
        offset = self._take(4 * num_parts)
        if offset is None:
            return []
        parts = unpack_from(f"<{num_parts}I", self._data, offset)
        if parts[0] != 0:
            self.error = ShapefileFormatError(
                f"{parts[0]}: invalid part, the first part must start at 0"
            )
            return []
        ends = []
        previous = 0
        for part in parts[1:]:
            if part > num_points:
                self.error = ShapefileFormatError(
                    f"{part}: invalid part, beyond the {num_points} points of the record"
                )
                return []
            if part < previous:
                self.error = ShapefileFormatError(
                    f"{part}: invalid part, parts must not decrease (previous {previous})"
                )
                return []
            ends.append(stride * part)
            previous = part
        ends.append(stride * num_points)
        return ends
