# income_tracker/schemas/income.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from income_tracker.db.models import IncomeType


def parse_due_date(value):
    """Accept 'YYYY-MM-DD' or a full ISO datetime string; keep only the date part."""
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            raise ValueError("dueDate must be a valid ISO date string")
    return value


def reject_text_numbers(value):
    """JSON numbers only; "15000" or true are not amounts."""
    if isinstance(value, (str, bool)):
        raise ValueError("must be a number")
    return value


class IncomeCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    due_date: date = Field(..., alias="dueDate")
    entity_id: str = Field(..., min_length=1, alias="entityId")
    month: int = Field(..., ge=1, le=12)
    year: int
    type: IncomeType
    description: Optional[str] = None
    gp_number: Optional[str] = Field(None, max_length=100, alias="gpNumber")
    user_id: str = Field(..., min_length=1, alias="userId")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value):
        return parse_due_date(value)

    @field_validator("amount", "month", "year", mode="before")
    @classmethod
    def numbers_only(cls, value):
        return reject_text_numbers(value)


class IncomeUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    due_date: Optional[date] = Field(None, alias="dueDate")
    entity_id: Optional[str] = Field(None, min_length=1, alias="entityId")
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = None
    type: Optional[IncomeType] = None
    description: Optional[str] = None
    gp_number: Optional[str] = Field(None, max_length=100, alias="gpNumber")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value):
        return parse_due_date(value)

    @field_validator("amount", "month", "year", mode="before")
    @classmethod
    def numbers_only(cls, value):
        return reject_text_numbers(value)
