"""Receipt pre-fill: OCR a receipt image and extract form fields.

This is the caller side of the extraction engine. Recognition failures
are caught here and turned into an empty pre-fill with a notice for the
user; the extractor only ever sees successfully recognized text.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pytesseract

from receipt_ocr.extraction.field_extractor import ExtractionResult, ReceiptFieldExtractor
from receipt_ocr.ocr.receipt_reader import ReceiptReader
from receipt_ocr.utils.config import AppConfig
from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PrefillResult:
    """Outcome of processing one receipt image."""

    success: bool
    notice: str
    extraction: ExtractionResult = field(default_factory=ExtractionResult)
    raw_text: str = ""
    ocr_confidence: float = 0.0


class ReceiptPrefillService:
    """Runs OCR on receipt images and extracts pre-fill fields.

    Args:
        config: Application configuration.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.reader = ReceiptReader(config.ocr)
        self.extractor = ReceiptFieldExtractor(config.extraction)

    def prefill(self, source: Path | bytes, filename: str = "receipt") -> PrefillResult:
        """Recognize a receipt and extract its amount, date, and description.

        Args:
            source: Path to the receipt image, or its raw bytes.
            filename: Display name for log records.

        Returns:
            A successful result with the extracted fields, or an
            unsuccessful one with every field absent if OCR failed.
        """
        try:
            ocr_result = self.reader.read(source, filename)
        except (pytesseract.TesseractError, RuntimeError, OSError) as exc:
            logger.warning("OCR failed for %s: %s", filename, exc)
            return PrefillResult(
                success=False,
                notice=self.config.prefill.failure_notice,
            )

        extraction = self.extractor.extract(ocr_result.text)
        return PrefillResult(
            success=True,
            notice=self.config.prefill.success_notice,
            extraction=extraction,
            raw_text=ocr_result.text,
            ocr_confidence=ocr_result.confidence,
        )

    def prefill_text(self, text: str) -> PrefillResult:
        """Extract fields from a transcript recognized elsewhere, skipping OCR."""
        return PrefillResult(
            success=True,
            notice=self.config.prefill.success_notice,
            extraction=self.extractor.extract(text),
            raw_text=text,
            ocr_confidence=1.0,
        )
