"""Month filter parsing for the list endpoint.

Accepts ``YYYY-M`` and ``YYYY-MM`` (``2019-1`` and ``2019-01`` are the same
month). Anything else is a client input error raised before the store is
touched.
"""

from __future__ import annotations
import re
from typing import Optional

from expense_svc.core.errors import ExpenseValidationError
from expense_svc.models.month import YearMonth

_MONTH_RE = re.compile(r"(\d{4})-(\d{1,2})", re.ASCII)
MIN_YEAR = 1


def parse_month(value: Optional[str]) -> Optional[YearMonth]:
    """Return the requested month, or None when no filter was given."""
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None
    match = _MONTH_RE.fullmatch(raw)
    if not match:
        raise ExpenseValidationError(
            f"invalid month '{value}': expected YYYY-MM"
        )
    year, month = int(match.group(1)), int(match.group(2))
    if year < MIN_YEAR:
        raise ExpenseValidationError(f"invalid month '{value}': year must be positive")
    if not 1 <= month <= 12:
        raise ExpenseValidationError(
            f"invalid month '{value}': month must be between 1 and 12"
        )
    return YearMonth(year, month)
