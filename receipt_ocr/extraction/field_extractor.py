"""Receipt field extraction: raw OCR text in, pre-fill fields out.

Normalizes the text once, then runs the amount, date, and description
extractors independently. Any field may be missing from the result; a
missing field is normal output, never an error.
"""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from receipt_ocr.normalization.text_normalizer import normalize_text
from receipt_ocr.utils.config import ExtractionConfig
from receipt_ocr.utils.logger import get_logger

from .amount_extractor import AmountCandidate, extract_amount, rank_amount_candidates
from .date_extractor import extract_date
from .description_extractor import extract_description

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Fields inferred from one receipt, each independently optional."""

    amount: Decimal | None = None
    date: dt.date | None = None
    description: str | None = None

    @property
    def is_empty(self) -> bool:
        """Whether no field could be extracted."""
        return self.amount is None and self.date is None and self.description is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-friendly values (amount as text, ISO date)."""
        return {
            "amount": str(self.amount) if self.amount is not None else None,
            "date": self.date.isoformat() if self.date is not None else None,
            "description": self.description,
        }


class ReceiptFieldExtractor:
    """Extracts amount, date, and description from receipt OCR text.

    Stateless apart from its configuration, so one instance can serve
    concurrent callers.

    Args:
        config: Extraction heuristics. Defaults to :class:`ExtractionConfig`.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def extract(self, raw_text: str | None) -> ExtractionResult:
        """Extract all pre-fill fields from raw OCR text.

        Args:
            raw_text: OCR transcript of one receipt; may be empty.

        Returns:
            Extraction result with absent fields set to ``None``.
        """
        raw_text = raw_text or ""
        if not raw_text.strip():
            logger.info("Empty OCR text, nothing to extract")
            return ExtractionResult()

        normalized = normalize_text(raw_text)
        result = ExtractionResult(
            amount=extract_amount(normalized, self.config),
            date=extract_date(normalized),
            # Normalization may rewrite words such as a trailing "RS" state
            # code, so the label comes from the untouched text.
            description=extract_description(raw_text, self.config),
        )

        logger.info(
            "Extracted fields: amount=%s date=%s description=%s",
            result.amount is not None,
            result.date is not None,
            result.description is not None,
        )
        return result

    def amount_candidates(self, raw_text: str | None) -> list[AmountCandidate]:
        """Return every scored amount candidate, best first."""
        return rank_amount_candidates(normalize_text(raw_text or ""), self.config)


def extract_fields(
    raw_text: str | None, config: ExtractionConfig | None = None
) -> ExtractionResult:
    """Extract pre-fill fields from raw OCR text with a one-off extractor."""
    return ReceiptFieldExtractor(config).extract(raw_text)
