from datetime import date

import pytest

from invoice_desk.extraction.normalizers import AmountNormalizer, DateNormalizer


@pytest.fixture
def amounts():
    return AmountNormalizer()


@pytest.fixture
def dates():
    return DateNormalizer()


def test_match_returns_raw_and_value(amounts):
    assert amounts.match("Összesen: 125 000 Ft") == ("125 000", 125000.0)


def test_match_without_currency_word(amounts):
    assert amounts.match("Összesen: 125 000") is None


def test_to_float_rejects_non_finite(amounts):
    assert amounts.to_float("nan") is None
    assert amounts.to_float("inf") is None
    assert amounts.to_float("12a") is None


@pytest.mark.parametrize("value, expected", [
    (125000, 125000.0),
    (1234.5, 1234.5),
    ("125000", 125000.0),
    ("125 000 Ft", 125000.0),
    ("1.234,50", 1234.5),
    ("1.234.567", 1234567.0),
    ("12.500", 12500.0),
    ("99,90 HUF", 99.9),
    ("12.5", 12.5),
])
def test_normalize_free_form_amounts(amounts, value, expected):
    assert amounts.normalize(value) == expected


@pytest.mark.parametrize("value", [None, "", "nincs", True, float("nan")])
def test_normalize_unusable_amounts(amounts, value):
    assert amounts.normalize(value) is None


def test_looks_like_amount(amounts):
    assert amounts.looks_like_amount("Összeg 5000ft")
    assert not amounts.looks_like_amount("Kft. székhely")


def test_match_date(dates):
    assert dates.match("Kelt: 2024.03.15.") == date(2024, 3, 15)
    assert dates.match("nincs dátum") is None


@pytest.mark.parametrize("line", ["2024.13.01", "2024.04.31", "2023.02.29", "2024.00.10"])
def test_out_of_range_dates_do_not_roll_over(dates, line):
    assert dates.match(line) is None


def test_looks_like_date_ignores_validity(dates):
    assert dates.looks_like_date("2024.13.45")


@pytest.mark.parametrize("value, expected", [
    ("2024-03-15", date(2024, 3, 15)),
    (date(2024, 1, 2), date(2024, 1, 2)),
    ("March 15, 2024", date(2024, 3, 15)),
])
def test_normalize_free_form_dates(dates, value, expected):
    assert dates.normalize(value) == expected


@pytest.mark.parametrize("value", [None, "", "nem dátum", "2024-02-30", "2024", "March 2024", "15 March"])
def test_normalize_unusable_dates(dates, value):
    assert dates.normalize(value) is None


@pytest.mark.parametrize("line", ["２０２４.０３.１５", "٢٠٢٤.٠٣.١٥"])
def test_non_ascii_digits_are_not_dates(dates, line):
    assert dates.match(line) is None
    assert not dates.looks_like_date(line)


@pytest.mark.parametrize("line", ["Összesen: ١٢٥ ٠٠٠ Ft", "Összesen: １２５ ０００ Ft"])
def test_non_ascii_digits_are_not_amounts(amounts, line):
    assert amounts.match(line) is None
    assert not amounts.looks_like_amount(line)


def test_normalize_rejects_non_ascii_digits(amounts):
    assert amounts.normalize("١٢٥٠٠٠") is None
