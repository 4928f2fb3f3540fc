"""
Tests for price table resolution.
"""
import pytest

from escape_booking.domains import PriceRow
from escape_booking.services.pricing import lookup_price, normalize_price_table, price_for


@pytest.fixture
def table():
    return [{"players": 2, "price": 40}, {"players": 4, "price": 70}]


def test_exact_match(table):
    assert price_for(table, 2) == 40
    assert lookup_price(table, 4).found is True
    assert lookup_price(table, 4).price == 70


def test_missing_row_defaults_to_zero(table):
    assert price_for(table, 3) == 0


def test_missing_row_is_distinguishable(table):
    result = lookup_price(table, 3)
    assert result.found is False
    assert result.price is None


def test_free_row_is_found():
    result = lookup_price([{"players": 1, "price": 0}], 1)
    assert result.found is True
    assert result.price == 0


def test_lookup_accepts_models():
    rows = [PriceRow(players=5, price=85.5)]
    assert price_for(rows, 5) == 85.5


def test_lookup_on_empty_table():
    assert lookup_price([], 2).found is False
    assert lookup_price(None, 2).found is False


def test_lookup_matches_numeric_strings():
    assert price_for([{"players": "3", "price": "55"}], 3) == 55


def test_normalize_keeps_last_duplicate_and_sorts():
    rows = normalize_price_table([
        {"players": 4, "price": 70},
        {"players": 2, "price": 40},
        {"players": 4, "price": 75},
    ])
    assert [(r.players, r.price) for r in rows] == [(2, 40), (4, 75)]


def test_normalize_drops_invalid_rows():
    rows = normalize_price_table([
        {"players": 0, "price": 10},
        {"players": 2.5, "price": 10},
        {"players": 3, "price": -1},
        {"players": "x", "price": 10},
        {"players": True, "price": 10},
        {"players": 3, "price": float("nan")},
        "3:10",
        {"players": 6, "price": 90},
    ])
    assert [(r.players, r.price) for r in rows] == [(6, 90)]


def test_normalize_non_list():
    assert normalize_price_table(None) == []
    assert normalize_price_table({"players": 2, "price": 40}) == []
