from __future__ import annotations

import codecs
import re
from typing import NamedTuple

from .exceptions import ShapefileException
from .types import ReadableBinStream

# Bare Windows code page numbers, optionally written as e.g. "ANSI 1252"
_code_page_re = re.compile(r"(?:ansi\s*)?(\d+)", re.IGNORECASE)


class CPG(NamedTuple):
    """The charset of the .dbf file's text fields."""

    # The name of a Python codec
    charset: str


def lookup_charset(name: str) -> str:
    """Returns the Python codec name for a charset name found in a .cpg file."""
    name = name.strip()
    match = _code_page_re.fullmatch(name)
    if match:
        name = f"cp{match.group(1)}"
    try:
        return codecs.lookup(name).name
    except LookupError as e:
        raise ShapefileException(f"Unknown charset '{name}'") from e


def read_cpg(f: ReadableBinStream) -> CPG:
    data = f.read()
    return CPG(lookup_charset(data.decode("ascii", "replace")))
