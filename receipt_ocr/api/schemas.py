"""Pydantic request/response schemas for the FastAPI endpoints."""

import datetime as dt
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field

from receipt_ocr.extraction.field_extractor import ExtractionResult


class TransactionType(StrEnum):
    """Kinds of transaction a receipt can be recorded as."""

    INCOME = "income"
    EXPENSE = "expense"


class ExtractedFields(BaseModel):
    """Pre-fill fields inferred from a receipt; any may be null."""

    amount: Decimal | None = None
    date: dt.date | None = None
    description: str | None = None

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ExtractedFields":
        return cls(
            amount=result.amount,
            date=result.date,
            description=result.description,
        )


class TextExtractionRequest(BaseModel):
    """Already-recognized receipt text to run through the extractor."""

    text: str = ""


class AmountCandidateResponse(BaseModel):
    """A scored amount candidate, for inspecting extraction decisions."""

    value: Decimal
    score: int
    position: int


class TextExtractionResponse(BaseModel):
    """Response schema for text-only extraction."""

    fields: ExtractedFields
    candidates: list[AmountCandidateResponse] = Field(default_factory=list)


class PrefillResponse(BaseModel):
    """Response schema for a receipt image pre-fill request."""

    success: bool
    receipt_id: str
    notice: str
    fields: ExtractedFields
    raw_text: str
    ocr_confidence: float
    processing_time_ms: float


class BatchItemResponse(BaseModel):
    """Response schema for a single item in a batch pre-fill."""

    filename: str
    result: PrefillResponse | None = None
    error: str | None = None


class BatchPrefillResponse(BaseModel):
    """Response schema for batch pre-fill of multiple receipts."""

    success: bool
    total_receipts: int
    successful: int
    failed: int
    results: list[BatchItemResponse]


class TransactionRequest(BaseModel):
    """A transaction form as submitted for saving.

    Values are checked by the rules engine, not by this schema.
    """

    type: str | None = None
    amount: str | float | None = None
    date: str | None = None
    description: str | None = None
    category: str | None = None


class ValidationResultResponse(BaseModel):
    """Response schema for a validation check result."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str


class ValidationResponse(BaseModel):
    """Response schema for transaction validation."""

    valid: bool
    errors: dict[str, list[str]]
    results: list[ValidationResultResponse]
    warnings: list[str] = Field(default_factory=list)


class CategoriesResponse(BaseModel):
    """Response schema listing transaction types and categories."""

    types: list[TransactionType]
    categories: list[str]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
    ocr_language: str
