import pytest

from core.forms import clean_optional, missing_required, parse_non_negative_int


def test_clean_optional():
    assert clean_optional("  hi ") == "hi"
    assert clean_optional("   ") is None
    assert clean_optional(None) is None


def test_missing_required_reports_labels_in_order():
    required = {"title": "Title", "date": "Date", "unit": "Unit"}
    assert missing_required({"title": " ", "date": None, "unit": "bags"}, required) == ["Title", "Date"]
    assert missing_required({"title": "x", "date": "2025-01-01", "unit": "u"}, required) == []


@pytest.mark.parametrize(
    "raw, expected",
    [("", 0), (None, 0), ("abc", 0), ("-4", 0), ("7", 7), ("2.8", 2), (5, 5), ("inf", 0)],
)
def test_parse_non_negative_int(raw, expected):
    assert parse_non_negative_int(raw) == expected
