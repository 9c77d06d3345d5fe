import httpx
import pytest

from utils.utils import convert_error_to_str, fmt_pct, fmt_price, fmt_signed, handle_api_error, normalize_ticker


@pytest.mark.parametrize("raw, expected", [
    (" aapl ", "AAPL"),
    ("brk.b", "BRK.B"),
    ("BF-B", "BF-B"),
    ("", None),
    (None, None),
    ("1ABC", None),
    ("TOOLONGTICKER", None),
    ("AA PL", None),
])
def test_normalize_ticker(raw, expected):
    assert normalize_ticker(raw) == expected


def test_formatters():
    assert fmt_price(1234.5) == "$1,234.50"
    assert fmt_price(None) == "—"
    assert fmt_signed(2) == "+2.00"
    assert fmt_signed(-1234.567) == "-1,234.57"
    assert fmt_pct(-20.0) == "-20.00%"
    assert fmt_pct(None) == "n/a"


def test_convert_error_to_str_joins_field_errors():
    text = convert_error_to_str({"ticker": ["required", "too long"], "from": "bad date"})
    assert text == "ticker: required, too long\nfrom: bad date"


def test_handle_api_error_prefers_json_message():
    resp = httpx.Response(403, json={"status": "ERROR", "error": "Unknown API Key"})
    assert handle_api_error(resp) == "Unknown API Key"


def test_handle_api_error_falls_back_to_text():
    resp = httpx.Response(502, text="Bad Gateway")
    assert handle_api_error(resp) == "Bad Gateway"
