"""
This module tests decoding of .dbf attribute tables.
"""

# std lib imports
import io
import logging
from datetime import date

# third party imports
import pytest

# our imports
import shpdecode
from shapefile_builders import dbf_file

FIELDS = [
    ("NAME", "C", 10),
    ("COUNT", "N", 5),
    ("AREA", "F", 8, 2),
    ("FOUNDED", "D", 8),
    ("ACTIVE", "L", 1),
]


def read(data, options=None):
    return shpdecode.read_dbf(io.BytesIO(data), options)


def test_read_dbf():
    data = dbf_file(
        FIELDS,
        [
            [b"Oslo", b"   12", b"  454.03", b"10480101", b"T"],
            [b"Bergen\x00\x00\x00\x00", b"-3", b"1e3", b"        ", b"?"],
        ],
    )
    dbf = read(data)
    assert dbf.header.version == 3
    assert dbf.header.last_update == date(2024, 5, 17)
    assert dbf.header.records == 2
    assert dbf.header.record_size == 1 + 10 + 5 + 8 + 8 + 1
    assert dbf.field_names == ["NAME", "COUNT", "AREA", "FOUNDED", "ACTIVE"]
    assert dbf.field_descriptors[2].decimal_count == 2
    assert len(dbf) == 2

    first, second = dbf.records
    assert first == ["Oslo", 12, 454.03, date(1048, 1, 1), True]
    assert first.NAME == "Oslo"
    assert first["COUNT"] == 12
    assert first.oid == 0
    assert second.as_dict() == {
        "NAME": "Bergen",
        "COUNT": -3,
        "AREA": 1000.0,
        "FOUNDED": None,
        "ACTIVE": None,
    }
    assert isinstance(second.COUNT, int)
    assert isinstance(second.AREA, float)


def test_deleted_records():
    data = dbf_file(
        [("ID", "N", 3)],
        [[b"1"], (b"*", [b"2"]), [b"3"]],
    )
    dbf = read(data)
    assert len(dbf) == 3
    assert dbf.record(1) is None
    assert [record.ID for record in dbf if record is not None] == [1, 3]
    assert dbf.record(2).oid == 2


def test_invalid_deletion_flag():
    data = dbf_file([("ID", "N", 3)], [(b"X", [b"1"])])
    with pytest.raises(shpdecode.ShapefileFormatError):
        read(data)


def test_record_size_must_match_fields():
    """
    Assert that a table whose field lengths plus the deletion
    flag do not add up to the record size is rejected.
    """
    data = dbf_file([("ID", "N", 3), ("NAME", "C", 4)], [], record_size=9)
    with pytest.raises(shpdecode.ShapefileFormatError):
        read(data)


@pytest.mark.parametrize(
    "flags,error",
    [
        (0x04, shpdecode.UnsupportedDBFError),  # dBase IV
        (0x0B, shpdecode.UnsupportedDBFError),  # memo
        (0x83, shpdecode.UnsupportedDBFError),  # .dbt memo file
    ],
)
def test_unsupported_versions(flags, error):
    with pytest.raises(error):
        read(dbf_file([("ID", "N", 3)], [], flags=flags))


def test_invalid_last_update():
    dbf = read(dbf_file([("ID", "N", 3)], [], last_update=(124, 13, 40)))
    assert dbf.header.last_update is None


def test_invalid_field_type():
    with pytest.raises(shpdecode.ShapefileFormatError):
        read(dbf_file([("ID", "X", 3)], []))


def test_field_name_trailing_nuls_are_trimmed():
    dbf = read(dbf_file([("ABCDEFGHIJK", "C", 1), ("ID", "C", 1)], []))
    assert dbf.field_names == ["ABCDEFGHIJK", "ID"]


@pytest.mark.parametrize(
    "value,expected",
    [
        (b"Y", True),
        (b"y", True),
        (b"T", True),
        (b"t", True),
        (b"N", False),
        (b"n", False),
        (b"F", False),
        (b"f", False),
        (b"?", None),
    ],
)
def test_logical_values(value, expected):
    dbf = read(dbf_file([("FLAG", "L", 1)], [[value]]))
    assert dbf.record(0).FLAG is expected


@pytest.mark.parametrize("value", [b"X", b" ", b"1"])
def test_invalid_logical_values(value):
    with pytest.raises(shpdecode.DBFFieldError):
        read(dbf_file([("FLAG", "L", 1)], [[value]]))


@pytest.mark.parametrize(
    "value,expected",
    [
        (b"     ", None),
        (b"*****", None),  # QGIS null
        (b"   42", 42),
        (b" +7  ", 7),
        (b" -1.5", -1.5),
        (b"  .25", 0.25),
        (b"2E+02", 200.0),
    ],
)
def test_numeric_values(value, expected):
    dbf = read(dbf_file([("VALUE", "N", 5, 1)], [[value]]))
    assert dbf.record(0).VALUE == expected


@pytest.mark.parametrize("value", [b"abc", b"1.2.3", b"1-2", b"0x10"])
def test_invalid_numeric_values(value):
    with pytest.raises(shpdecode.DBFFieldError, match="Record 0: field VALUE"):
        read(dbf_file([("VALUE", "N", 5)], [[value]]))


@pytest.mark.parametrize(
    "value,expected",
    [
        (b"20240229", date(2024, 2, 29)),
        (b"00000000", None),
        (b"        ", None),
        (b"\x00" * 8, None),
    ],
)
def test_date_values(value, expected):
    dbf = read(dbf_file([("DAY", "D", 8)], [[value]]))
    assert dbf.record(0).DAY == expected


@pytest.mark.parametrize("value", [b"20230229", b"2024-1-1", b"20241301"])
def test_invalid_date_values(value):
    with pytest.raises(shpdecode.DBFFieldError):
        read(dbf_file([("DAY", "D", 8)], [[value]]))


def test_memo_values():
    dbf = read(dbf_file([("NOTE", "M", 10)], [[b"  0000012\x00"]]))
    memo = dbf.record(0).NOTE
    assert isinstance(memo, shpdecode.DBFMemo)
    assert memo == b"0000012"


def test_charset():
    """
    Assert that character fields are decoded with the
    configured charset, utf-8 by default.
    """
    data = dbf_file([("NAME", "C", 10)], [["Tromsø".encode("latin-1")]])
    with pytest.raises(shpdecode.DBFFieldError):
        read(data)
    dbf = read(data, shpdecode.ReadDBFOptions(charset="latin-1"))
    assert dbf.record(0).NAME == "Tromsø"
    dbf = read(data, shpdecode.ReadDBFOptions(encoding_errors="replace"))
    assert dbf.record(0).NAME == "Troms�"

    utf8 = dbf_file([("NAME", "C", 10)], [["Tromsø".encode("utf-8")]])
    assert read(utf8).record(0).NAME == "Tromsø"


def test_unknown_charset():
    data = dbf_file([("NAME", "C", 10)], [])
    with pytest.raises(shpdecode.ShapefileException):
        read(data, shpdecode.ReadDBFOptions(charset="no-such-charset"))


def test_unknown_encoding_error_handler():
    """
    Assert that an unknown error handler is rejected before any
    character field is decoded with it.
    """
    data = dbf_file([("NAME", "C", 4)], [[b"\xff\xfe"]])
    with pytest.raises(shpdecode.ShapefileException, match="bogus"):
        read(data, shpdecode.ReadDBFOptions(encoding_errors="bogus"))


def test_skip_broken_fields(caplog):
    """
    Assert that in permissive mode a field that cannot be
    decoded becomes None, and a warning is logged.
    """
    data = dbf_file(
        [("ID", "N", 3), ("FLAG", "L", 1)],
        [[b"abc", b"T"], [b"2", b"X"]],
    )
    options = shpdecode.ReadDBFOptions(skip_broken_fields=True)
    with caplog.at_level(logging.WARNING, logger="shpdecode.dbf"):
        dbf = read(data, options)
    assert dbf.records == [[None, True], [2, None]]
    assert len(caplog.records) == 2


def test_end_of_file_marker():
    """
    Assert that the end of file marker may be missing,
    but anything else after the records is rejected.
    """
    records = [[b"1"]]
    assert len(read(dbf_file([("ID", "N", 3)], records, eof=b""))) == 1
    with pytest.raises(shpdecode.ShapefileFormatError):
        read(dbf_file([("ID", "N", 3)], records, eof=b"\x00"))


def test_header_padding_is_skipped():
    data = dbf_file([("ID", "N", 3)], [[b"7"]], padding=b"\x00" * 263)
    assert read(data).record(0).ID == 7


def test_truncated_records():
    data = dbf_file([("ID", "N", 3)], [[b"1"], [b"2"]], eof=b"")
    with pytest.raises(shpdecode.ShapefileTruncatedError):
        read(data[:-2])


def test_missing_header_terminator():
    data = dbf_file([("ID", "N", 3)], [])
    with pytest.raises(shpdecode.ShapefileTruncatedError):
        read(data[:32 + 32])


def test_limits():
    data = dbf_file(FIELDS, [[b"a", b"1", b"1", b"", b"T"]] * 3)
    with pytest.raises(shpdecode.ShapefileLimitError):
        read(data, shpdecode.ReadDBFOptions(max_records=2))
    with pytest.raises(shpdecode.ShapefileLimitError):
        read(data, shpdecode.ReadDBFOptions(max_record_size=32))
    with pytest.raises(shpdecode.ShapefileLimitError):
        read(data, shpdecode.ReadDBFOptions(max_header_size=64))
    assert len(read(data, shpdecode.ReadDBFOptions(max_records=3))) == 3
