"""
Transaction Model

One ledger line parsed from the user's CSV.

DESIGN DECISION: Every field is optional. The parser does no header
validation, so a CSV without a "category" column simply yields
transactions whose category is None. This is not an error.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Transaction(BaseModel):
    """
    A single parsed transaction.

    Amount sign convention: positive = inflow, negative = outflow.
    Identity is only the position in the parsed sequence.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    date: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_finite(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v

    @property
    def is_inflow(self) -> bool:
        return self.amount is not None and self.amount > 0
