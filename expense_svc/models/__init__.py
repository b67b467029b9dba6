"""Pydantic domain models for the Expense Service."""

from .constants import ExpenseCategory  # re-export
from .expense import Expense, ExpenseIn, ExpenseModifyIn
from .month import YearMonth

__all__ = [
    "ExpenseCategory",
    "Expense",
    "ExpenseIn",
    "ExpenseModifyIn",
    "YearMonth",
]
