from __future__ import annotations

from datetime import date
from typing import (
    Final,
    Literal,
    Optional,
    Protocol,
    TypeVar,
    Union,
)

## Custom type variables

T = TypeVar("T")

# A single position, with as many components as the layout's stride
Coord = tuple[float, ...]
Coords = list[Coord]

BBox = tuple[float, float, float, float]
MBox = tuple[float, float]
ZBox = tuple[float, float]


class ReadableBinStream(Protocol):
    def read(self, size: int = -1) -> bytes: ...


class ReadSeekableBinStream(Protocol):
    def seek(self, offset: int, whence: int = 0) -> int: ...
    def tell(self) -> int: ...
    def read(self, size: int = -1) -> bytes: ...


FieldTypeT = Literal["C", "D", "F", "L", "M", "N"]


# https://en.wikipedia.org/wiki/.dbf#Database_records
class FieldType:
    """A bare bones 'enum', as the enum library noticeably slows performance."""

    C: Final = "C"  # "Character"  # (str)
    D: Final = "D"  # "Date"
    F: Final = "F"  # "Floating point"
    L: Final = "L"  # "Logical"  # (bool)
    M: Final = "M"  # "Memo"  # Legacy. Read inline, .dbt blocks are not followed
    N: Final = "N"  # "Numeric"  # (int or float)
    __members__: set[FieldTypeT] = {
        "C",
        "D",
        "F",
        "L",
        "M",
        "N",
    }


RecordValueNotDate = Union[bool, int, float, str, bytes]

# A Possible value in a dbf record, i.e. L, N, M, F, C, or D types
RecordValue = Optional[Union[RecordValueNotDate, date]]
