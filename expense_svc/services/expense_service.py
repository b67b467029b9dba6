"""Expense operations for an authenticated owner.

The service is the single place where the authentication verdict, the month
filter and the store meet. Every failure leaves it as one of the
ExpenseServiceError subclasses; nothing else is expected to cross into the
transport layer.

Ownership rules:

- create always stores the authenticated identity as owner, whatever the body
  says;
- modify and delete treat "does not exist" and "belongs to someone else" the
  same way so callers cannot probe for other users' ids;
- id and owner are never changed by modify.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from expense_svc.core.errors import AuthenticationError, ExpenseNotFoundError
from expense_svc.db.store import ExpenseStore
from expense_svc.models import Expense, ExpenseIn, ExpenseModifyIn
from expense_svc.services.auth import Authenticator
from expense_svc.services.month_filter import parse_month

logger = logging.getLogger("expense_svc.service")

NOT_FOUND_DETAIL = "expense not found"


class ExpenseService:
    def __init__(self, store: ExpenseStore, authenticator: Authenticator):
        self.store = store
        self.authenticator = authenticator

    # Authentication ---------------------------------------------------

    def authenticate(
        self, identity_token: Optional[str], secret_token: Optional[str]
    ) -> str:
        """Return the owner id for a valid credential pair.

        Missing tokens are rejected without contacting the identity service.
        """
        if not identity_token or not secret_token:
            logger.info("rejecting request without credentials")
            raise AuthenticationError("missing authentication credentials")
        if not self.authenticator.verify(identity_token, secret_token):
            raise AuthenticationError("invalid authentication credentials")
        return identity_token

    # Operations -------------------------------------------------------

    def list_expenses(self, owner: str, month: Optional[str] = None) -> List[Expense]:
        month_filter = parse_month(month)
        expenses = self.store.query(owner, month_filter)
        logger.debug(
            "listed %d expenses (month=%s)", len(expenses), month_filter or "all"
        )
        return expenses

    def create_expense(self, owner: str, payload: ExpenseIn) -> Expense:
        if payload.user_id is not None and payload.user_id != owner:
            logger.warning("ignoring foreign userId on create")
        expense = self.store.insert(
            owner=owner,
            location=payload.location,
            amount=payload.amount,
            date=payload.date,
            category=payload.category,
        )
        logger.info("created expense %s", expense.id)
        return expense

    def modify_expense(self, owner: str, payload: ExpenseModifyIn) -> Expense:
        existing = self._owned(owner, payload.id)
        updated = self.store.update(existing.with_changes(payload))
        logger.info("modified expense %s", updated.id)
        return updated

    def delete_expense(self, owner: str, expense_id: int) -> None:
        self._owned(owner, expense_id)
        self.store.remove(expense_id, owner)
        logger.info("deleted expense %s", expense_id)

    # Helpers ----------------------------------------------------------

    def _owned(self, owner: str, expense_id: int) -> Expense:
        existing = self.store.get(expense_id)
        if existing is None or existing.user_id != owner:
            logger.info("expense %s not found for requester", expense_id)
            raise ExpenseNotFoundError(NOT_FOUND_DETAIL)
        return existing
