"""Configuration management for the receipt OCR pre-fill service.

Loads and validates YAML configuration with defaults for the OCR
backend, field extraction heuristics, pre-fill notices, and validation.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_KEYWORDS: list[str] = [
    "total",
    "valor total",
    "total geral",
    "a pagar",
    "pagar",
    "pagamento",
    "subtotal",
]


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR backend."""

    tesseract_cmd: str | None = None
    default_lang: str = "por"
    psm: int = 6
    timeout_s: float = Field(default=30.0, ge=0)


class ExtractionConfig(BaseModel):
    """Heuristics used by the receipt field extractors."""

    total_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TOTAL_KEYWORDS)
    )
    context_window: int = Field(default=40, ge=0)
    currency_max_distance: int = Field(default=3, ge=0)
    description_min_length: int = Field(default=5, ge=0)
    description_max_length: int = Field(default=100, gt=0)


class PrefillConfig(BaseModel):
    """User-facing notices shown after a receipt has been processed."""

    success_notice: str = "Recibo processado! Revise os dados antes de salvar."
    failure_notice: str = "Erro ao processar recibo. Preencha os dados manualmente."


class ValidationConfig(BaseModel):
    """Configuration for the transaction validation rules engine."""

    rules_path: str = "configs/validation_rules.yaml"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    prefill: PrefillConfig = Field(default_factory=PrefillConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
