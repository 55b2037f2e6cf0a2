"""Transaction form state and receipt pre-fill merging."""

import datetime as dt
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from receipt_ocr.extraction.field_extractor import ExtractionResult

TRANSACTION_TYPES = ("income", "expense")

CATEGORIES: list[str] = [
    "Alimentação",
    "Transporte",
    "Moradia",
    "Saúde",
    "Educação",
    "Lazer",
    "Compras",
    "Salário",
    "Investimentos",
    "Outros",
]


@dataclass(frozen=True)
class TransactionDraft:
    """Editable state of the income/expense form before it is saved."""

    type: str = "expense"
    amount: Decimal | None = None
    date: dt.date = field(default_factory=dt.date.today)
    description: str = ""
    category: str | None = None

    def to_fields(self) -> dict[str, Any]:
        """Return the draft as a field dict for the rules engine."""
        return {
            "type": self.type,
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "category": self.category,
        }


def apply_extraction(
    draft: TransactionDraft, result: ExtractionResult
) -> TransactionDraft:
    """Merge extracted receipt fields into a draft.

    Present fields overwrite the draft's values; absent fields leave the
    draft untouched. Type and category are never inferred from a receipt.
    """
    updates: dict[str, Any] = {}
    if result.amount is not None:
        updates["amount"] = result.amount
    if result.date is not None:
        updates["date"] = result.date
    if result.description is not None:
        updates["description"] = result.description
    return replace(draft, **updates)
