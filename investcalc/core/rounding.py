"""Numeric helpers shared by the projection strategies and the solver."""

from __future__ import annotations

import math
from typing import Optional

# absorbs float noise such as 0.1 * 12 == 1.2000000000000002
_PERIOD_EPSILON = 1e-9


def round_currency(amount: float) -> float:
    """Round to the nearest whole currency unit, halves away from zero."""
    if amount < 0:
        return -float(math.floor(-amount + 0.5))
    return float(math.floor(amount + 0.5))


def count_periods(term_years: float, periods_per_year: int) -> int:
    """Number of compounding periods simulated for a term.

    A started period is simulated in full, so fractional counts round up.
    """
    if term_years <= 0:
        return 0
    return max(math.ceil(term_years * periods_per_year - _PERIOD_EPSILON), 0)


def count_years(term_years: float) -> int:
    """Rows in the yearly table: ceil(term), with the same float guard."""
    if term_years <= 0:
        return 0
    return max(math.ceil(term_years - _PERIOD_EPSILON), 0)


def effective_annual_return(
    final_amount: float, initial_capital: float, term_years: float
) -> Optional[float]:
    """Constant annual growth (percent) taking initial_capital to final_amount.

    Undefined, and returned as None, when there is no capital or no term, or
    when the annualised figure does not fit in a float (tiny terms).
    """
    if initial_capital <= 0 or term_years <= 0 or final_amount < 0:
        return None
    if final_amount == 0:
        return -100.0
    try:
        growth = math.expm1(math.log(final_amount / initial_capital) / term_years)
    except OverflowError:
        return None
    if not math.isfinite(growth):
        return None
    return growth * 100.0
