"""FastAPI application for the receipt OCR pre-fill API.

Provides endpoints to pre-fill a transaction from a receipt photo or
from already-recognized text, to validate a transaction before saving,
and to list the form's categories.
"""

import shutil
import time
import uuid
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from receipt_ocr.forms.prefill import PrefillResult, ReceiptPrefillService
from receipt_ocr.forms.transaction import CATEGORIES
from receipt_ocr.utils.config import AppConfig, load_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.validation.rules_engine import RulesEngine

from .schemas import (
    AmountCandidateResponse,
    BatchItemResponse,
    BatchPrefillResponse,
    CategoriesResponse,
    ExtractedFields,
    HealthResponse,
    PrefillResponse,
    TextExtractionRequest,
    TextExtractionResponse,
    TransactionRequest,
    TransactionType,
    ValidationResponse,
    ValidationResultResponse,
)

logger = get_logger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(
    title="Receipt OCR Pre-fill API",
    description="Pre-fill income/expense records from photographed receipts",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_components() -> tuple[AppConfig, ReceiptPrefillService, RulesEngine]:
    """Initialize and return shared processing components.

    Returns:
        Tuple of (config, prefill_service, rules_engine).
    """
    config = load_config()
    prefill_service = ReceiptPrefillService(config)
    rules_engine = RulesEngine(Path(config.validation.rules_path))
    return config, prefill_service, rules_engine


_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/tiff",
    "image/bmp",
    "image/webp",
    "application/octet-stream",
}


def _to_response(result: PrefillResult, start_time: float) -> PrefillResponse:
    return PrefillResponse(
        success=result.success,
        receipt_id=str(uuid.uuid4()),
        notice=result.notice,
        fields=ExtractedFields.from_result(result.extraction),
        raw_text=result.raw_text,
        ocr_confidence=result.ocr_confidence,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    config = load_config()
    tesseract_cmd = config.ocr.tesseract_cmd or "tesseract"
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        tesseract_available=shutil.which(tesseract_cmd) is not None,
        ocr_language=config.ocr.default_lang,
    )


@app.get("/categories", response_model=CategoriesResponse)
async def list_categories() -> CategoriesResponse:
    """List transaction types and the categories offered by the form."""
    return CategoriesResponse(types=list(TransactionType), categories=CATEGORIES)


@app.post("/extract", response_model=PrefillResponse)
async def extract_receipt(
    file: Annotated[UploadFile, File(...)],
) -> PrefillResponse:
    """Pre-fill transaction fields from an uploaded receipt photo.

    An OCR failure is not an HTTP error: the response carries
    ``success=false``, empty fields, and a notice for the user.

    Args:
        file: Uploaded receipt image (PNG, JPEG, TIFF, BMP, or WebP).

    Returns:
        Extracted fields, raw OCR text, and a user-facing notice.
    """
    start_time = time.time()

    if file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )

    try:
        _, prefill_service, _ = _get_components()
        content = await file.read()
        result = await run_in_threadpool(
            prefill_service.prefill, content, file.filename or "receipt"
        )
        return _to_response(result, start_time)
    except HTTPException:
        raise
    except Exception as exc:
        logger.error("Receipt pre-fill failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/extract/batch", response_model=BatchPrefillResponse)
async def extract_batch(
    files: Annotated[list[UploadFile], File(...)],
) -> BatchPrefillResponse:
    """Pre-fill fields from several receipt photos.

    Args:
        files: List of uploaded receipt images.

    Returns:
        Batch results with per-file outcomes.
    """
    results: list[BatchItemResponse] = []
    successful = 0

    for file in files:
        try:
            result = await extract_receipt(file)
            results.append(
                BatchItemResponse(filename=file.filename or "unknown", result=result)
            )
            if result.success:
                successful += 1
        except HTTPException as exc:
            results.append(
                BatchItemResponse(filename=file.filename or "unknown", error=exc.detail)
            )

    return BatchPrefillResponse(
        success=successful > 0,
        total_receipts=len(files),
        successful=successful,
        failed=len(files) - successful,
        results=results,
    )


@app.post("/extract/text", response_model=TextExtractionResponse)
async def extract_text(request: TextExtractionRequest) -> TextExtractionResponse:
    """Extract pre-fill fields from text recognized elsewhere.

    Args:
        request: The OCR transcript of one receipt.

    Returns:
        Extracted fields and the ranked amount candidates.
    """
    _, prefill_service, _ = _get_components()
    extractor = prefill_service.extractor
    result = extractor.extract(request.text)
    candidates = [
        AmountCandidateResponse(
            value=candidate.value, score=candidate.score, position=candidate.position
        )
        for candidate in extractor.amount_candidates(request.text)
    ]
    return TextExtractionResponse(
        fields=ExtractedFields.from_result(result), candidates=candidates
    )


@app.post("/transactions/validate", response_model=ValidationResponse)
async def validate_transaction(request: TransactionRequest) -> ValidationResponse:
    """Check a transaction form against the business rules before saving.

    Args:
        request: Submitted transaction form values.

    Returns:
        Overall verdict, failure messages per field, and every check run.
    """
    _, _, rules_engine = _get_components()
    report = rules_engine.validate(request.model_dump(), "transaction")
    return ValidationResponse(
        valid=report.all_valid,
        errors=report.errors,
        results=[
            ValidationResultResponse(
                field_name=r.field_name,
                is_valid=r.is_valid,
                message=r.message,
                rule_name=r.rule_name,
            )
            for r in report.results
        ],
        warnings=report.warnings,
    )
