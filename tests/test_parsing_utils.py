from decimal import Decimal
from io import BytesIO
from pathlib import Path

from factor_reports.infrastructure.parsing.utils import decode_text, ensure_bytes, parse_number, split_lines


def test_decode_text_honours_declared_encoding():
    data = '<?xml version="1.0" encoding="ISO-8859-1"?><a>Müller</a>'.encode("latin-1")

    assert "Müller" in decode_text(data)


def test_decode_text_defaults_to_utf8():
    assert decode_text("<a>Café</a>".encode("utf-8")) == "<a>Café</a>"


def test_decode_text_falls_back_to_windows_1254_without_declaration():
    data = "<a>Kumaş</a>".encode("windows-1254")

    assert decode_text(data) == "<a>Kumaş</a>"


def test_decode_text_wrong_declaration_falls_back_to_lossy_utf8():
    data = b'<?xml version="1.0" encoding="UTF-8"?><a>\xff\xfe</a>'

    text = decode_text(data)

    assert text.startswith("<?xml")
    assert "�" in text


def test_ensure_bytes_accepts_paths_and_buffers(tmp_path: Path):
    path = tmp_path / "doc.xml"
    path.write_bytes(b"<a/>")

    assert ensure_bytes(path) == b"<a/>"
    assert ensure_bytes(str(path)) == b"<a/>"
    assert ensure_bytes(BytesIO(b"<b/>")) == b"<b/>"
    assert ensure_bytes(b"<c/>") == b"<c/>"


def test_split_lines_keeps_form_feeds_inside_lines():
    assert split_lines("one\r\ntwo\fpage\nthree") == ["one", "two\fpage", "three"]


def test_parse_number_blank_and_garbage():
    assert parse_number(None) is None
    assert parse_number("") is None
    assert parse_number("   ") is None
    assert parse_number(" 12.50 ") == Decimal("12.50")
    assert parse_number("12,000").is_nan()
    assert parse_number("abc").is_nan()


def test_parse_number_signaling_nan_becomes_quiet():
    number = parse_number("sNaN")

    assert number.is_qnan()
    assert not number.is_snan()
