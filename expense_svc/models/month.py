from datetime import MAXYEAR, date
from typing import NamedTuple, Optional


class YearMonth(NamedTuple):
    """A validated calendar month."""

    year: int
    month: int

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def next_first_day(self) -> Optional[date]:
        """First day of the following month (exclusive upper bound).

        None for December 9999, the last month `date` can represent.
        """
        if self.month == 12:
            if self.year == MAXYEAR:
                return None
            return date(self.year + 1, 1, 1)
        return date(self.year, self.month + 1, 1)

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
