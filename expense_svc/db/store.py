from __future__ import annotations

"""Expense store abstraction.

The service only relies on this interface, so the SQLite store and the
in-memory store are interchangeable. Implementations must serialize writes to
the same identifier and report backend failures as StoreUnavailableError.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from expense_svc.models import Expense, YearMonth


class ExpenseStore(ABC):
    @abstractmethod
    def query(self, owner: str, month: Optional[YearMonth] = None) -> List[Expense]:
        """Return the owner's expenses, limited to `month` when given."""
        raise NotImplementedError

    @abstractmethod
    def get(self, expense_id: int) -> Optional[Expense]:
        raise NotImplementedError

    @abstractmethod
    def insert(
        self,
        *,
        owner: str,
        location: str,
        amount: float,
        date,
        category: str,
    ) -> Expense:
        """Persist a new expense and return it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def update(self, expense: Expense) -> Expense:
        """Replace the mutable fields of an existing expense.

        Raises ExpenseNotFoundError when no row with that id and owner exists.
        """
        raise NotImplementedError

    @abstractmethod
    def remove(self, expense_id: int, owner: str) -> None:
        """Raises ExpenseNotFoundError when no row with that id and owner exists."""
        raise NotImplementedError

    @abstractmethod
    def count(self, owner: Optional[str] = None) -> int:
        raise NotImplementedError
