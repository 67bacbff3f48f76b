from __future__ import annotations

from typing import NamedTuple

from .exceptions import ShapefileFormatError
from .types import ReadableBinStream


class PRJ(NamedTuple):
    """The coordinate system of a shapefile, as well-known text."""

    projection: str


def read_prj(f: ReadableBinStream) -> PRJ:
    data = f.read()
    try:
        return PRJ(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ShapefileFormatError(f"Invalid .prj text: {e}") from e
