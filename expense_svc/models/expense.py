from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
import datetime
from .constants import ExpenseCategory


class ExpenseIn(BaseModel):
    """Create payload.

    `id` and `userId` are accepted so clients can post a full Expense body, but
    the service ignores both: the store assigns the id and the owner is always
    the authenticated identity.

    `amount` is an IEEE double (as stored): any value that parses to a float
    round-trips exactly, but decimals with more than 17 significant digits are
    rounded on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    location: str
    amount: float = Field(..., allow_inf_nan=False)
    date: datetime.date
    category: ExpenseCategory
    user_id: Optional[str] = Field(None, alias="userId")

    @field_validator("location")
    @classmethod
    def location_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("location must not be empty")
        return v


class ExpenseModifyIn(ExpenseIn):
    """Full replacement payload for an existing expense. `id` is mandatory."""

    id: int


class Expense(BaseModel):
    """Stored expense as returned to clients."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    location: str
    amount: float
    date: datetime.date
    category: ExpenseCategory
    user_id: str = Field(..., alias="userId")

    def with_changes(self, payload: ExpenseIn) -> "Expense":
        """Return a copy carrying the payload's mutable fields.

        Identifier and owner are never taken from the payload.
        """
        return self.model_copy(
            update={
                "location": payload.location,
                "amount": payload.amount,
                "date": payload.date,
                "category": payload.category,
            }
        )
