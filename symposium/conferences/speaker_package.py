"""Speaker package: what a conference covers for its speakers."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

CATEGORIES = ("travel", "food", "hotel")


class SpeakerPackage(BaseModel):
    """
    Currency plus an amount per category.

    Amounts are stored as integer minor units (cents) and exposed as decimals
    with two places.
    """

    currency: Optional[str] = Field(None, max_length=3)
    travel: Optional[Decimal] = Field(None, ge=0)
    food: Optional[Decimal] = Field(None, ge=0)
    hotel: Optional[Decimal] = Field(None, ge=0)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip().lower()

    @field_validator(*CATEGORIES)
    @classmethod
    def round_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return None
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    @classmethod
    def from_database(cls, data: Optional[Dict[str, Any]]) -> "SpeakerPackage":
        if not data:
            return cls()
        amounts = {
            category: Decimal(data[category]) / 100
            for category in CATEGORIES
            if data.get(category) is not None
        }
        return cls(currency=data.get("currency"), **amounts)

    def to_database(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"currency": self.currency}
        for category, amount in self.amounts().items():
            data[category] = int(amount * 100)
        return data

    def amounts(self) -> Dict[str, Decimal]:
        return {
            category: getattr(self, category)
            for category in CATEGORIES
            if getattr(self, category) is not None
        }

    def count(self) -> int:
        return len(self.amounts())

    def is_displayable(self) -> bool:
        """Without a currency the amounts are meaningless, so nothing is shown."""
        return self.currency is not None and self.count() > 0
