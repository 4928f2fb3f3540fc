"""
Price table resolution.

Prices are looked up by exact party size; there is no interpolation
between rows.
"""
import math
from typing import Any, Iterable, List, Union

from escape_booking.domains.rooms import PriceLookup, PriceRow

PriceTable = Iterable[Union[PriceRow, dict]]


def _row_values(row: Any):
    if isinstance(row, PriceRow):
        return row.players, row.price
    if isinstance(row, dict):
        return row.get("players"), row.get("price")
    return None, None


def _as_number(value: Any):
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_price_table(rows: Any) -> List[PriceRow]:
    """Clean a raw price table.

    Rows with a non-integer or non-positive party size, or a negative or
    non-numeric price, are dropped. Duplicate party sizes keep the last
    row. The result is sorted by party size.
    """
    if not isinstance(rows, (list, tuple)):
        return []
    prices = {}
    for row in rows:
        players, price = _row_values(row)
        players, price = _as_number(players), _as_number(price)
        if players is None or price is None:
            continue
        if not players.is_integer() or players < 1 or price < 0:
            continue
        prices[int(players)] = price
    return [PriceRow(players=p, price=prices[p]) for p in sorted(prices)]


def lookup_price(table: PriceTable, players: int) -> PriceLookup:
    """Find the price for an exact party size."""
    for row in table or []:
        row_players, row_price = _row_values(row)
        if _as_number(row_players) == players:
            price = _as_number(row_price)
            if price is not None:
                return PriceLookup(found=True, price=price)
    return PriceLookup(found=False)


def price_for(table: PriceTable, players: int) -> float:
    """Price for a party size, or 0 when the table has no matching row."""
    return lookup_price(table, players).price_or_zero
