import pytest

from data_model.laws import Law
from normalizer.fingerprint import document_fingerprint, law_fingerprint
from normalizer.gazette import (
    GazetteInfo,
    gazette_key_from_number,
    normalize_gazette_key,
    parse_gazette,
)
from normalizer.law_keys import compute_law_keys, title_key_of


# ---------------------------------------------------------------------------
# Gazette
# ---------------------------------------------------------------------------

def test_parse_full_reference():
    info = parse_gazette("Službeni glasnik RS, broj 12/05 od 3.2.2005.")
    assert info == GazetteInfo(number="12/05", key="12_05", date="2005-02-03")


def test_parse_four_digit_year_and_no_date():
    info = parse_gazette("Sl. glasnik BiH 7/2010")
    assert info.number == "7/2010"
    assert info.key == "7_10"
    assert info.date is None


@pytest.mark.parametrize("text, expected", [
    ("1.1.39", "2039-01-01"),
    ("1.1.40", "1940-01-01"),
    ("31.12.98", "1998-12-31"),
])
def test_two_digit_year_pivot(text, expected):
    assert parse_gazette(text).date == expected


def test_impossible_date_is_dropped():
    assert parse_gazette("45.13.2005").date is None
    assert parse_gazette("broj 12/05 od 31.2.2005.").date is None
    assert parse_gazette("broj 12/23 od 29.2.2023.").date is None
    assert parse_gazette("broj 12/24 od 29.2.2024.").date == "2024-02-29"


def test_empty_reference():
    assert parse_gazette(None) == GazetteInfo(None, None, None)
    assert parse_gazette("") == GazetteInfo(None, None, None)


@pytest.mark.parametrize("number, key", [
    ("12/05", "12_05"),
    ("12/2005", "12_05"),
    ("012/2005", "12_05"),
    (" 3 / 11 ", "3_11"),
    ("bez broja", None),
    (None, None),
])
def test_gazette_key_from_number(number, key):
    assert gazette_key_from_number(number) == key


def test_normalize_gazette_key():
    assert normalize_gazette_key("12_05") == "12_05"
    assert normalize_gazette_key("12-2005") == "12_05"
    assert normalize_gazette_key("  ") is None
    assert normalize_gazette_key("Posebno") == "posebno"


# ---------------------------------------------------------------------------
# Fingerprint
# ---------------------------------------------------------------------------

def test_windows_path_is_case_and_separator_insensitive():
    a = document_fingerprint("D:\\Dokumenti\\RS\\PDF\\Zakon o radu.pdf")
    b = document_fingerprint("d:/dokumenti/rs/pdf/ZAKON O RADU.pdf")
    assert a == b == "d:/dokumenti/rs/pdf/zakon o radu.pdf"


def test_relative_segments_are_resolved():
    assert document_fingerprint("pdf/./rs/../zakon.pdf") == "pdf/zakon.pdf"


def test_url_keeps_scheme_and_collapses_slashes():
    assert document_fingerprint("HTTPS://Site.ba//zakoni/12.pdf") == "https://site.ba/zakoni/12.pdf"


def test_missing_location():
    assert document_fingerprint(None) is None
    assert document_fingerprint("   ") is None
    assert law_fingerprint(None, None) is None


def test_path_wins_over_url():
    assert law_fingerprint("a/b.pdf", "http://x.ba/b.pdf") == "a/b.pdf"
    assert law_fingerprint(None, "http://x.ba/b.pdf") == "http://x.ba/b.pdf"


# ---------------------------------------------------------------------------
# Derived law keys
# ---------------------------------------------------------------------------

def test_compute_law_keys_fills_every_derived_field():
    law = Law(
        id=1,
        jurisdiction="RS",
        title="Zakon o radu",
        gazette_number="12/05",
        document_path="D:\\X.pdf",
    )
    assert compute_law_keys(law) == {
        "title_normalized":     "zakon o radu",
        "root_title":           "radu",
        "gazette_key":          "12_05",
        "document_fingerprint": "d:/x.pdf",
        "slug":                 "radu",
    }


def test_compute_law_keys_returns_only_changes():
    law = Law(
        id=1,
        jurisdiction="RS",
        title="Zakon o radu",
        title_normalized="zakon o radu",
        root_title="radu",
        slug="zakon-o-radu-rs",
        gazette_key="12_05",
    )
    assert compute_law_keys(law) == {}


def test_title_key_of_prefers_root_title():
    assert title_key_of(Law(id=1, jurisdiction="RS", title="x", root_title="radu")) == "radu"
    assert title_key_of(Law(id=1, jurisdiction="RS", title="x", title_normalized="Zakon O Radu")) == "zakon o radu"
    assert title_key_of(Law(id=1, jurisdiction="RS", title="Zakon o radu")) == "radu"
