"""Receipt image loading and recognition.

Loads a receipt photo from disk or from uploaded bytes and runs it
through the OCR backend as-is; no image preprocessing is applied.
"""

import io
from pathlib import Path

import numpy as np
from PIL import Image

from receipt_ocr.utils.config import OCRConfig
from receipt_ocr.utils.logger import get_logger

from .tesseract_engine import OCRResult, TesseractEngine

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp")


class ReceiptReader:
    """Loads receipt images and recognizes their text.

    Args:
        config: OCR backend configuration.
    """

    def __init__(self, config: OCRConfig) -> None:
        self.config = config
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.tesseract_cmd,
            default_lang=config.default_lang,
        )

    def read(self, source: Path | bytes, filename: str = "receipt") -> OCRResult:
        """Recognize the text of a receipt image.

        Args:
            source: Path to an image file, or raw image bytes.
            filename: Display name used in log records.

        Returns:
            OCR result for the image.

        Raises:
            OSError: If the image cannot be opened or Tesseract is missing.
            pytesseract.TesseractError: If recognition fails.
            RuntimeError: If recognition times out.
        """
        logger.info("Reading receipt: %s", filename)
        image = self._load_image(source)
        return self.ocr_engine.extract_text(
            image,
            psm=self.config.psm,
            timeout=self.config.timeout_s,
        )

    def _load_image(self, source: Path | bytes) -> np.ndarray:
        """Decode an image into an RGB numpy array."""
        handle = io.BytesIO(source) if isinstance(source, bytes) else Path(source)
        with Image.open(handle) as img:
            return np.array(img.convert("RGB"))
