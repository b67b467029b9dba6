"""Process-local expense store.

Used when ``EXPENSE_STORE=memory`` and by unit tests. A single lock serializes
all access, and ids are handed out from a counter that never goes backwards.
"""

from __future__ import annotations

from datetime import date
import itertools
import threading
from typing import Dict, List, Optional

from expense_svc.core.errors import ExpenseNotFoundError
from expense_svc.models import Expense, ExpenseCategory, YearMonth
from .store import ExpenseStore


class InMemoryExpenseStore(ExpenseStore):
    def __init__(self) -> None:
        self._rows: Dict[int, Expense] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def query(self, owner: str, month: Optional[YearMonth] = None) -> List[Expense]:
        with self._lock:
            rows = [
                e.model_copy()
                for e in self._rows.values()
                if e.user_id == owner and (month is None or month.contains(e.date))
            ]
        return sorted(rows, key=lambda e: (e.date, e.id), reverse=True)

    def get(self, expense_id: int) -> Optional[Expense]:
        with self._lock:
            row = self._rows.get(expense_id)
            return row.model_copy() if row else None

    def count(self, owner: Optional[str] = None) -> int:
        with self._lock:
            if owner is None:
                return len(self._rows)
            return sum(1 for e in self._rows.values() if e.user_id == owner)

    def insert(
        self,
        *,
        owner: str,
        location: str,
        amount: float,
        date: date,
        category: ExpenseCategory,
    ) -> Expense:
        with self._lock:
            expense = Expense(
                id=next(self._ids),
                location=location,
                amount=float(amount),
                date=date,
                category=category,
                user_id=owner,
            )
            self._rows[expense.id] = expense
            return expense.model_copy()

    def update(self, expense: Expense) -> Expense:
        with self._lock:
            current = self._rows.get(expense.id)
            if current is None or current.user_id != expense.user_id:
                raise ExpenseNotFoundError("expense not found")
            self._rows[expense.id] = expense.model_copy()
            return expense

    def remove(self, expense_id: int, owner: str) -> None:
        with self._lock:
            current = self._rows.get(expense_id)
            if current is None or current.user_id != owner:
                raise ExpenseNotFoundError("expense not found")
            del self._rows[expense_id]
