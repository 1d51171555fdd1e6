"""
money.py — Money representation
Amounts are stored and transmitted as integer miliunits (value x 1000) so
arithmetic never touches floats. Conversion to display units happens once,
at the presentation boundary.
"""

import logging
import math
from numbers import Number

logger = logging.getLogger(__name__)

MILIUNITS_PER_UNIT = 1000

_stats = {"invalid_amounts": 0}


def to_display(amount: int) -> float:
    """Miliunits → display units."""
    return amount / MILIUNITS_PER_UNIT


def to_storage(value: float) -> int:
    """Display units → miliunits."""
    return round(value * MILIUNITS_PER_UNIT)


def parse_amount(raw) -> int | None:
    """Return ``raw`` as integer miliunits, or None if it is not a usable number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        value = float(raw) if not isinstance(raw, Number) else raw
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    # Stored values are whole miliunits; anything finer is rounding noise
    return round(value)


def sum_amounts(amounts) -> int:
    """Sum miliunit amounts, skipping (and counting) the unparseable ones."""
    total = 0
    for raw in amounts:
        amount = parse_amount(raw)
        if amount is None:
            _stats["invalid_amounts"] += 1
            logger.warning(f"Invalid transaction amount: {raw!r}")
            continue
        total += amount
    return total


def normalize_zero(value):
    """Map an exact zero to None at the API boundary.

    The presentation layer reads None as "not configured" and any number,
    including a negative one, as an explicit amount.
    """
    if value is None or value == 0:
        return None
    return value


def data_quality_stats() -> dict:
    return dict(_stats)


def reset_data_quality_stats():
    _stats["invalid_amounts"] = 0
