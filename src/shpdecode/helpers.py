from __future__ import annotations

import array
import os
from os import PathLike
from struct import Struct
from typing import Any, Generic, TypeVar, overload

from .exceptions import ShapefileTruncatedError
from .types import ReadableBinStream, ReadSeekableBinStream, T

# Helpers


unpack_2_uint32_be = Struct(">2I").unpack

# Upper bound for a single read() call, so that a corrupt length field
# can only cost as much memory as the stream actually holds.
READ_CHUNK_SIZE = 1 << 20


@overload
def fsdecode_if_pathlike(path: PathLike[Any]) -> str: ...
@overload
def fsdecode_if_pathlike(path: T) -> T: ...
def fsdecode_if_pathlike(path: Any) -> Any:
    if isinstance(path, PathLike):
        return os.fsdecode(path)  # str

    return path


def read_exactly(f: ReadableBinStream, size: int) -> bytes:
    """Reads exactly size bytes from f, or raises ShapefileTruncatedError."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = f.read(min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    if remaining > 0:
        raise ShapefileTruncatedError(
            f"Unexpected end of data: expected {size} bytes, got {size - remaining}"
        )
    return b"".join(chunks)


def stream_length(f: ReadSeekableBinStream) -> int:
    """Returns the total length of a seekable stream, leaving its position unchanged."""
    checkpoint = f.tell()
    f.seek(0, 2)
    length = f.tell()
    f.seek(checkpoint)
    return length


# Begin

ARR_TYPE = TypeVar("ARR_TYPE", int, float)


# In Python 3.12 we can do:
# class _Array(array.array[ARR_TYPE], Generic[ARR_TYPE]):
class _Array(array.array, Generic[ARR_TYPE]):  # type: ignore[type-arg]
    """Converts python tuples to lists of the appropriate type.
    Used to hold flat coordinate buffers and unpacked header parts."""

    def __repr__(self) -> str:
        return str(self.tolist())
