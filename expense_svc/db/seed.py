"""Seeding helpers for demo/fixture expenses.

`seed_demo_expenses` fills an empty store with a small fixed data set used by
local development and the integration tests: six expenses for
``test@test.co.uk`` (three of them in January 2019) and one for another user.
A store that already holds rows is left untouched so this can be safely re-run.
"""

from __future__ import annotations
from datetime import date
from typing import List, Tuple

from expense_svc.models import ExpenseCategory
from .store import ExpenseStore

DEMO_USER = "test@test.co.uk"
OTHER_DEMO_USER = "other@test.co.uk"

DEMO_EXPENSES: List[Tuple[str, str, float, date, ExpenseCategory]] = [
    (DEMO_USER, "Papa Johns", 2500.0, date(2019, 1, 12), ExpenseCategory.EATOUT),
    (DEMO_USER, "Starbucks", 1200.0, date(2019, 1, 12), ExpenseCategory.CAFE),
    (DEMO_USER, "Electric Co.", 22500.0, date(2019, 1, 12), ExpenseCategory.UTILITIES),
    (DEMO_USER, "Tesco", 4350.0, date(2019, 2, 3), ExpenseCategory.GROCERIES),
    (DEMO_USER, "Water Co.", 3100.0, date(2019, 2, 14), ExpenseCategory.UTILITIES),
    (DEMO_USER, "Costa", 850.0, date(2019, 3, 1), ExpenseCategory.CAFE),
    (OTHER_DEMO_USER, "Nandos", 1800.0, date(2019, 1, 20), ExpenseCategory.EATOUT),
]


def seed_demo_expenses(store: ExpenseStore) -> int:
    """Insert the demo rows into an empty store; return how many were added."""
    if store.count() > 0:
        return 0
    for owner, location, amount, day, category in DEMO_EXPENSES:
        store.insert(
            owner=owner, location=location, amount=amount, date=day, category=category
        )
    return len(DEMO_EXPENSES)
