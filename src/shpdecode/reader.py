from __future__ import annotations

import io
import logging
import os
import posixpath
import zipfile
from collections.abc import Iterator
from typing import IO, Any, NamedTuple, Optional, Union

from .classes import ShapeRecord, ShapeRecords, Shapes, _Record
from .constants import SHAPETYPE_LOOKUP
from .cpg import CPG, read_cpg
from .dbf import DBF, ReadDBFOptions, read_dbf
from .exceptions import ShapefileException, ShapefileFormatError
from .geojson import GeoJSONFeatureCollection, GeoJSONFeatureCollectionWithBBox
from .helpers import fsdecode_if_pathlike
from .prj import PRJ, read_prj
from .shapes import Shape
from .shp import SHP, ReadSHPOptions, read_shp
from .shx import SHX, read_shx
from .types import BBox

logger = logging.getLogger(__name__)

# .cpg comes first so its charset can be used for the .dbf
CONSTITUENT_FILE_EXTS = ["cpg", "dbf", "prj", "shp", "shx"]
assert all(ext.islower() for ext in CONSTITUENT_FILE_EXTS)


class ReadShapefileOptions(NamedTuple):
    dbf: Optional[ReadDBFOptions] = None
    shp: Optional[ReadSHPOptions] = None


class Shapefile:
    """The decoded files of a shapefile. Any of them may be missing, but
    those present must hold the same number of records.

    Each record pairs the ith shape of the .shp file with the ith record of
    the .dbf file, as a ShapeRecord.
    """

    def __init__(
        self,
        dbf: DBF | None = None,
        prj: PRJ | None = None,
        cpg: CPG | None = None,
        shp: SHP | None = None,
        shx: SHX | None = None,
    ):
        self.dbf = dbf
        self.prj = prj
        self.cpg = cpg
        self.shp = shp
        self.shx = shx

        counts = {
            ext: len(constituent)
            for ext, constituent in (("dbf", dbf), ("shp", shp), ("shx", shx))
            if constituent is not None
        }
        if len(set(counts.values())) > 1:
            raise ShapefileFormatError(
                "Inconsistent number of records: "
                + ", ".join(f"{count} in .{ext}" for ext, count in counts.items())
            )

    def __str__(self) -> str:
        """
        Use some general info on the shapefile as __str__
        """
        info = ["shapefile"]
        if self.shp is not None:
            info.append(f"    {len(self)} shapes (type '{self.shape_type_name}')")
        if self.dbf is not None:
            info.append(
                f"    {len(self)} records ({len(self.dbf.field_descriptors)} fields)"
            )
        return "\n".join(info)

    @property
    def num_records(self) -> int:
        """The number of records, from whichever of .dbf, .shp and .shx is present."""
        for constituent in (self.dbf, self.shp, self.shx):
            if constituent is not None:
                return len(constituent)
        return 0

    def __len__(self) -> int:
        return self.num_records

    @property
    def shape_type(self) -> int | None:
        if self.shp is not None:
            return self.shp.header.shape_type
        if self.shx is not None:
            return self.shx.header.shape_type
        return None

    @property
    def shape_type_name(self) -> str | None:
        shape_type = self.shape_type
        return None if shape_type is None else SHAPETYPE_LOOKUP[shape_type]

    @property
    def bbox(self) -> BBox | None:
        """The extent of the .shp file header, None if it has no bounds."""
        if self.shp is None or self.shp.header.bounds is None:
            return None
        return self.shp.header.bounds.bbox

    def shape(self, i: int) -> Shape | None:
        if self.shp is None:
            return None
        return self.shp.record(i)

    def record(self, i: int) -> ShapeRecord:
        """Returns the geometry and attributes of the ith record. Either is
        None when missing: a NULL shape, a deleted record, or no .shp or .dbf
        file."""
        if not -self.num_records <= i < self.num_records:
            raise IndexError(
                f"Index {i} out of range for {self.num_records} records"
            )
        record: _Record | None = None
        if self.dbf is not None:
            record = self.dbf.record(i)
        return ShapeRecord(shape=self.shape(i), record=record)

    def __iter__(self) -> Iterator[ShapeRecord]:
        """Iterates through the shapes/records in the shapefile."""
        for i in range(self.num_records):
            yield self.record(i)

    def shapes(self) -> Shapes:
        if self.shp is None:
            return Shapes()
        return self.shp.shapes()

    def records(self) -> list[_Record | None]:
        if self.dbf is None:
            return []
        return list(self.dbf)

    def shape_records(self) -> ShapeRecords:
        return ShapeRecords(self)

    @property
    def __geo_interface__(
        self,
    ) -> GeoJSONFeatureCollection | GeoJSONFeatureCollectionWithBBox:
        shaperecords = self.shape_records()
        bbox = self.bbox
        if bbox is None:
            return shaperecords.__geo_interface__
        return GeoJSONFeatureCollectionWithBBox(
            bbox=list(bbox),
            **shaperecords.__geo_interface__,
        )


def _shapefile_from_contents(
    contents: dict[str, tuple[str, bytes]],
    options: ReadShapefileOptions | None = None,
) -> Shapefile:
    """Decodes the files of a shapefile, given as a mapping from lower case
    extension to (name, data)."""
    if options is None:
        options = ReadShapefileOptions()
    decoded: dict[str, Any] = {}
    for ext in CONSTITUENT_FILE_EXTS:
        if ext not in contents:
            continue
        name, data = contents[ext]
        f = io.BytesIO(data)
        try:
            if ext == "cpg":
                decoded[ext] = read_cpg(f)
            elif ext == "dbf":
                dbf_options = options.dbf or ReadDBFOptions()
                cpg = decoded.get("cpg")
                if cpg is not None and not dbf_options.charset:
                    dbf_options = dbf_options._replace(charset=cpg.charset)
                decoded[ext] = read_dbf(f, dbf_options)
            elif ext == "prj":
                decoded[ext] = read_prj(f)
            elif ext == "shp":
                decoded[ext] = read_shp(f, len(data), options.shp)
            else:
                decoded[ext] = read_shx(f, len(data))
        except ShapefileException as e:
            raise e.__class__(f"{name}: {e}") from e
        logger.debug("Decoded %s", name)
    return Shapefile(**decoded)


def _try_read_constituent_file(shapefile_name: str, ext: str) -> bytes | None:
    """
    Attempts to read a .shp, .dbf, .shx, .prj or .cpg file,
    with both lower case and upper case file extensions.
    If neither exists, None is returned.
    """
    for cased_ext in [ext, ext.upper()]:
        try:
            with open(f"{shapefile_name}.{cased_ext}", "rb") as f:
                return f.read()
        except FileNotFoundError:
            pass
    return None


def read_zip_archive(
    archive: zipfile.ZipFile, options: ReadShapefileOptions | None = None
) -> Shapefile:
    """Reads the shapefile held in an open zip archive. The archive may hold
    at most one file of each constituent extension, matched case
    insensitively. macOS resource forks under __MACOSX/ are ignored."""
    contents: dict[str, tuple[str, bytes]] = {}
    for info in archive.infolist():
        if info.is_dir():
            continue
        name = info.filename
        if name.startswith("__MACOSX/") or "/__MACOSX/" in name:
            logger.debug("Skipping %s", name)
            continue
        ext = posixpath.splitext(name)[1].lower().lstrip(".")
        if ext not in CONSTITUENT_FILE_EXTS:
            continue
        if ext in contents:
            raise ShapefileException(
                f"Zipfile contains more than one .{ext} file: "
                f"{contents[ext][0]}, {name}"
            )
        contents[ext] = (name, archive.read(info))

    if not contents:
        raise ShapefileException("Zipfile does not contain any shapefile files")
    return _shapefile_from_contents(contents, options)


def read_shapefile(
    path: Union[str, os.PathLike[Any]],
    options: ReadShapefileOptions | None = None,
) -> Shapefile:
    """Reads a shapefile from the local filesystem.

    path is either a zip archive (ending in .zip), or the basename of the
    shapefile, with or without the extension of one of its files. Each of
    the .shp, .shx, .dbf, .prj and .cpg files is read if it exists, with
    its extension in lower or upper case.
    """
    path = fsdecode_if_pathlike(path)
    if not isinstance(path, str):
        raise TypeError(f"Expected a file path, got {path!r}")

    if path.lower().endswith(".zip"):
        with zipfile.ZipFile(path, "r") as archive:
            return read_zip_archive(archive, options)

    shapefile_name, ext = os.path.splitext(path)
    if ext.lower().lstrip(".") not in CONSTITUENT_FILE_EXTS:
        shapefile_name = path

    contents: dict[str, tuple[str, bytes]] = {}
    for constituent_ext in CONSTITUENT_FILE_EXTS:
        data = _try_read_constituent_file(shapefile_name, constituent_ext)
        if data is not None:
            contents[constituent_ext] = (f"{shapefile_name}.{constituent_ext}", data)

    if not contents:
        raise ShapefileException(
            f"Unable to open {shapefile_name}.dbf or {shapefile_name}.shp."
        )
    return _shapefile_from_contents(contents, options)


def read_shapefile_from_files(
    shp: IO[bytes] | None = None,
    shx: IO[bytes] | None = None,
    dbf: IO[bytes] | None = None,
    prj: IO[bytes] | None = None,
    cpg: IO[bytes] | None = None,
    options: ReadShapefileOptions | None = None,
) -> Shapefile:
    """Reads a shapefile from already open binary file-like objects, for
    example io.BytesIO instances."""
    files = {"shp": shp, "shx": shx, "dbf": dbf, "prj": prj, "cpg": cpg}
    contents = {
        ext: (f"<{ext} stream>", f.read()) for ext, f in files.items() if f is not None
    }
    return _shapefile_from_contents(contents, options)
