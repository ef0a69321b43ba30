import json
import logging

import pytest

from bebuffer.cli import main
from bebuffer.layout import Field, LayoutError, parse_field


def _run(capsys, argv):
    rc = main(argv)
    return rc, capsys.readouterr()


def test_pack_reports_dropped_fields(capsys):
    rc, out = _run(capsys, ["pack", "--capacity", "4", "u16=0x1234", "u32=1", "s8=-1"])
    assert rc == 0
    doc = json.loads(out.out)
    assert doc["state"] == {"size": 4, "written": 3, "available": 1, "data_hex": "1234ff"}
    assert [f["status"] for f in doc["fields"]] == ["ok", "saturated", "ok"]


def test_pack_strings_bytes_and_format(capsys):
    rc, out = _run(capsys, ["pack", "--capacity", "16", "str:4=ab", "bytes=dead", "fmt:%03d=7"])
    assert rc == 0
    doc = json.loads(out.out)
    assert doc["state"]["data_hex"] == (b"ab\x00\x00" + b"\xde\xad" + b"007").hex()
    assert doc["fields"][2] == {"field": "fmt:%03d=7", "status": "ok", "length": 3}


def test_pack_truncated_format(capsys):
    rc, out = _run(capsys, ["pack", "--capacity", "3", "fmt:%s=hello"])
    assert rc == 0
    doc = json.loads(out.out)
    assert doc["state"]["written"] == 5
    assert doc["fields"][0]["status"] == "truncated"


def test_pack_exact_fit_format_is_truncated(capsys, caplog):
    # four digits into four bytes: the NUL takes the last one
    with caplog.at_level(logging.WARNING, logger="bebuffer.cli"):
        rc, out = _run(capsys, ["pack", "--capacity", "4", "fmt:%d=1234"])
    assert rc == 0
    doc = json.loads(out.out)
    assert doc["state"]["data_hex"] == "31323300"
    assert doc["fields"][0]["status"] == "truncated"
    assert any("did not fit" in r.getMessage() for r in caplog.records)


def test_pack_clamped_format_is_truncated(capsys, caplog):
    with caplog.at_level(logging.WARNING, logger="bebuffer.cli"):
        rc, out = _run(capsys, ["pack", "--capacity", "3", "--clamp-format", "fmt:%s=hello"])
    assert rc == 0
    doc = json.loads(out.out)
    assert doc["state"]["written"] == 3
    assert doc["state"]["data_hex"] == "686500"
    assert doc["fields"][0] == {"field": "fmt:%s=hello", "status": "truncated", "length": 5}
    assert any("did not fit" in r.getMessage() for r in caplog.records)


def test_pack_format_that_fits_is_ok(capsys):
    rc, out = _run(capsys, ["pack", "--capacity", "5", "fmt:%d=1234"])
    assert rc == 0
    assert json.loads(out.out)["fields"][0]["status"] == "ok"


def test_unpack(capsys):
    rc, out = _run(capsys, ["unpack", b"abcdefgh".hex(), "u32", "u32", "u32"])
    assert rc == 0
    doc = json.loads(out.out)
    assert [f["value"] for f in doc["fields"]] == [0x61626364, 0x65666768, 0]
    assert [f["status"] for f in doc["fields"]] == ["ok", "ok", "saturated"]
    assert doc["remaining"] == 0


def test_unpack_str_and_bytes(capsys):
    rc, out = _run(capsys, ["unpack", "6162000000ff", "str:4", "bytes:1", "bytes:4"])
    assert rc == 0
    doc = json.loads(out.out)
    assert doc["fields"][0]["value"] == "ab"
    assert doc["fields"][1]["value"] == "00"
    assert doc["fields"][2]["status"] == "insufficient_data"
    assert doc["remaining"] == 1


@pytest.mark.parametrize("argv", [
    ["pack", "--capacity", "-1", "u8=1"],
    ["pack", "--capacity", "4", "x8=1"],
    ["pack", "--capacity", "4", "u8"],
    ["pack", "--capacity", "4", "u8=zz"],
    ["pack", "--capacity", "4", "fmt:%d=abc"],
    ["unpack", "zz", "u8"],
    ["unpack", "00", "str"],
])
def test_bad_input_exits_with_2(capsys, argv):
    rc, out = _run(capsys, argv)
    assert rc == 2
    assert "error:" in out.err


def test_parse_field():
    assert parse_field("str:8=abc", with_value=True) == Field("str", "8", "abc")
    assert parse_field("U32", with_value=False) == Field("u32")
    assert parse_field("fmt:%d=1", with_value=True).spec == "fmt:%d=1"
    with pytest.raises(LayoutError):
        parse_field("u16:2", with_value=False)
    with pytest.raises(LayoutError):
        parse_field("fmt:%d", with_value=False)
