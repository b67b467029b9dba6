"""SQLite-backed expense store.

Responsibilities
----------------
- Scope every read and write to the owning user id.
- Run each write in its own transaction so concurrent writes to one id never
  interleave.
- Translate sqlite3 failures into StoreUnavailableError so callers never see
  driver details.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
import logging
import sqlite3
from typing import Any, Dict, Iterator, List, Optional

from expense_svc.core.errors import ExpenseNotFoundError, StoreUnavailableError
from expense_svc.models import Expense, ExpenseCategory, YearMonth
from .store import ExpenseStore

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
# INTEGER PRIMARY KEY is a signed 64-bit value; larger ids cannot exist.
MAX_ROW_ID = 2**63 - 1

logger = logging.getLogger("expense_svc.db")


def _row_to_expense(row: Dict[str, Any]) -> Expense:
    return Expense(
        id=row["id"],
        location=row["location"],
        amount=row["amount"],
        date=datetime.strptime(row["date"], "%Y-%m-%d").date(),
        category=row["category"],
        user_id=row["user_id"],
    )


class Database(ExpenseStore):
    def __init__(self, db_path: Path, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Connection helpers
    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            logger.exception("cannot open expense database")
            raise StoreUnavailableError("expense store unavailable") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.exception("expense database operation failed")
            raise StoreUnavailableError("expense store unavailable") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Reads
    def query(self, owner: str, month: Optional[YearMonth] = None) -> List[Expense]:
        clauses = ["user_id = ?"]
        params: List[Any] = [owner]
        if month is not None:
            # ISO dates sort lexically, so a half-open range selects one month.
            clauses.append("date >= ?")
            params.append(month.first_day.isoformat())
            upper = month.next_first_day
            if upper is not None:
                clauses.append("date < ?")
                params.append(upper.isoformat())
        where = " WHERE " + " AND ".join(clauses)
        sql = f"SELECT * FROM expenses{where} ORDER BY date DESC, id DESC"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [_row_to_expense(dict(r)) for r in cur.fetchall()]

    def get(self, expense_id: int) -> Optional[Expense]:
        if not -MAX_ROW_ID <= expense_id <= MAX_ROW_ID:
            return None
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
            row = cur.fetchone()
            return _row_to_expense(dict(row)) if row else None

    def count(self, owner: Optional[str] = None) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            if owner is None:
                cur.execute("SELECT COUNT(*) FROM expenses")
            else:
                cur.execute("SELECT COUNT(*) FROM expenses WHERE user_id = ?", (owner,))
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    # ------------------------------------------------------------------
    # Writes
    def insert(
        self,
        *,
        owner: str,
        location: str,
        amount: float,
        date: date,
        category: ExpenseCategory,
    ) -> Expense:
        category = ExpenseCategory(category)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO expenses (
                    user_id, location, amount, date, category, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (owner, location, float(amount), date.isoformat(), category.value),
            )
            expense_id = int(cur.lastrowid)
        return Expense(
            id=expense_id,
            location=location,
            amount=float(amount),
            date=date,
            category=category,
            user_id=owner,
        )

    def update(self, expense: Expense) -> Expense:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE expenses
                SET location = ?, amount = ?, date = ?, category = ?,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ? AND user_id = ?
                """,
                (
                    expense.location,
                    float(expense.amount),
                    expense.date.isoformat(),
                    expense.category.value,
                    expense.id,
                    expense.user_id,
                ),
            )
            if cur.rowcount == 0:
                raise ExpenseNotFoundError("expense not found")
        return expense

    def remove(self, expense_id: int, owner: str) -> None:
        if not -MAX_ROW_ID <= expense_id <= MAX_ROW_ID:
            raise ExpenseNotFoundError("expense not found")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "DELETE FROM expenses WHERE id = ? AND user_id = ?",
                (expense_id, owner),
            )
            if cur.rowcount == 0:
                raise ExpenseNotFoundError("expense not found")


__all__ = ["Database"]
