"""Expense persistence: store interface, implementations and factory."""

from __future__ import annotations

from expense_svc.core.config import Settings
from .dal import Database
from .memory import InMemoryExpenseStore
from .schema import init_db
from .store import ExpenseStore


def make_expense_store(settings: Settings) -> ExpenseStore:
    """Build the store selected by `settings.expense_store`.

    SQLite stores get their schema created on the way out.
    """
    if settings.expense_store == "memory":
        return InMemoryExpenseStore()
    if settings.expense_store == "sqlite":
        if settings.db_path is None:
            settings.init_post_load()
        init_db(settings.db_path)  # type: ignore[arg-type]
        return Database(settings.db_path)  # type: ignore[arg-type]
    raise ValueError(f"Unknown expense store kind '{settings.expense_store}'")


__all__ = ["Database", "ExpenseStore", "InMemoryExpenseStore", "make_expense_store"]
