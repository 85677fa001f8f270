"""Cash drawer reconciliation.

Counts come straight from form inputs, so everything here is forgiving:
blank, non-numeric or negative entries count as zero. Money is handled as
Decimal cents so repeated additions never drift.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from core.constants import DENOMINATIONS

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

DENOMINATION_LABELS = {value: f"${value}" for value in DENOMINATIONS}

Counts = Mapping[Any, Any]


def parse_count(raw: Any) -> int:
    """Bill count from a form value; anything unusable is 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return 0
    if not value.is_finite() or value <= 0:
        return 0
    return int(value)


def parse_amount(raw: Any) -> Decimal:
    """Dollar amount (fee, payouts) from a form value, rounded to cents."""
    if raw is None or isinstance(raw, bool):
        return ZERO
    if isinstance(raw, float):
        raw = repr(raw)
    try:
        value = Decimal(str(raw).strip() or "0")
    except (InvalidOperation, ValueError):
        return ZERO
    if not value.is_finite() or value <= 0:
        return ZERO
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _count_for(counts: Counts, denomination: int) -> Any:
    if denomination in counts:
        return counts[denomination]
    return counts.get(str(denomination))


def subtotal(denomination: int, raw: Any) -> Decimal:
    return Decimal(parse_count(raw) * denomination).quantize(CENT)


def total(counts: Optional[Counts]) -> Decimal:
    """Sum of count x face value over the fixed denominations."""
    if not counts:
        return ZERO
    amount = ZERO
    for denomination in DENOMINATIONS:
        amount += subtotal(denomination, _count_for(counts, denomination))
    return amount


def net_cash(
    opening_counts: Optional[Counts],
    closing_counts: Optional[Counts],
    fee: Any = 0,
    payouts: Any = 0,
) -> Decimal:
    return reconcile(opening_counts, closing_counts, fee, payouts).net_cash


@dataclass(frozen=True)
class DrawerSummary:
    opening_total: Decimal
    closing_total: Decimal
    stall_fee: Decimal = ZERO
    payouts: Decimal = ZERO

    @property
    def net_cash(self) -> Decimal:
        return self.closing_total - self.opening_total - self.stall_fee - self.payouts


def reconcile(
    opening_counts: Optional[Counts],
    closing_counts: Optional[Counts],
    fee: Any = 0,
    payouts: Any = 0,
) -> DrawerSummary:
    return DrawerSummary(
        opening_total=total(opening_counts),
        closing_total=total(closing_counts),
        stall_fee=parse_amount(fee),
        payouts=parse_amount(payouts),
    )


def format_currency(amount: Any) -> str:
    """``Decimal('1234.5')`` -> ``'$1,234.50'``; negatives as ``'-$12.00'``."""
    value = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
