"""
Money helpers shared by the parser, aggregator and categorizer.

All amounts are Decimal and rounded half away from zero to two places.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MONEY_QUANTUM = Decimal("0.01")
ZERO = Decimal("0.00")


def round2(value: Union[Decimal, int, str]) -> Decimal:
    """Round to cents, half away from zero"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def parse_amount(text: str) -> Decimal:
    """Parse '1,234.5' -> Decimal('1234.50')"""
    return round2(Decimal(text.replace(",", "")))


def fee_key(fee: Decimal) -> str:
    """Canonical bucket key for an entry fee, e.g. '$5.00'"""
    return f"${round2(fee):.2f}"
