"""Domain enumerations for validation.

Categories are a closed set; an unknown value fails request decoding before
any service code runs.
"""

from enum import Enum


class ExpenseCategory(str, Enum):
    EATOUT = "EATOUT"
    CAFE = "CAFE"
    UTILITIES = "UTILITIES"
    GROCERIES = "GROCERIES"
    TRANSPORT = "TRANSPORT"
    RENT = "RENT"
    ENTERTAINMENT = "ENTERTAINMENT"
    SHOPPING = "SHOPPING"
    HEALTH = "HEALTH"
    TRAVEL = "TRAVEL"
    OTHER = "OTHER"

