# accounting/services/money.py

"""
MONEY HELPERS

Single-currency decimal arithmetic shared by posting and reporting.

- Ledger amounts are 2dp, ROUND_HALF_UP
- Reports emit JSON-safe floats (major units) + exact ints (minor units)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from accounting.services.exceptions import PostingEventError

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0.00")

# DecimalField(max_digits=18, decimal_places=2)
MAX_INTEGER_DIGITS = 16


def money(value, *, field: str = "amount") -> Decimal:
    if value is None or value == "":
        return ZERO

    if isinstance(value, bool):
        raise PostingEventError(f"Invalid money value for {field}: {value!r}")

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise PostingEventError(f"Invalid money value for {field}: {value!r}") from exc

    if not amt.is_finite():
        raise PostingEventError(f"Invalid money value for {field}: {value!r}")

    try:
        amt = amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise PostingEventError(f"Amount too large for {field}: {value!r}") from exc

    check_magnitude(amt, field=field)
    return amt


def check_magnitude(amount: Decimal, *, field: str = "amount") -> None:
    if amount and amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise PostingEventError(
            f"Amount too large for {field}: at most {MAX_INTEGER_DIGITS} integer digits allowed"
        )


def q2(amount: Decimal | None) -> Decimal:
    return (amount or ZERO).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def q4(amount: Decimal | None) -> Decimal:
    return (amount or Decimal("0")).quantize(FOURPLACES, rounding=ROUND_HALF_UP)


def to_major_number(amount: Decimal | None) -> float:
    return float(q2(amount))


def to_minor_int(amount: Decimal | None) -> int:
    return int((q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))
