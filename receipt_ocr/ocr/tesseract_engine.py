"""Tesseract OCR backend for receipt images.

Turns a receipt photo into the flat text transcript consumed by the
field extractors, plus a word-level confidence summary.
"""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRWord:
    """A single recognized word and its confidence in [0, 1]."""

    text: str
    confidence: float
    line_num: int


@dataclass
class OCRResult:
    """Recognition output for one receipt image."""

    text: str
    words: list[OCRWord]
    language: str
    confidence: float


class TesseractEngine:
    """Wrapper around Tesseract for receipt text recognition.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Default OCR language code (Portuguese by default).
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "por",
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang

    def extract_text(
        self,
        image: np.ndarray,
        lang: str | None = None,
        psm: int = 6,
        timeout: float = 0,
    ) -> OCRResult:
        """Recognize the text of a receipt image.

        Args:
            image: Receipt image as a numpy array.
            lang: OCR language code. Defaults to the engine default.
            psm: Tesseract page segmentation mode. Mode 6 (single uniform
                block) suits narrow till receipts.
            timeout: Seconds before Tesseract is killed; 0 disables it.

        Returns:
            OCRResult with the full transcript and word confidences.

        Raises:
            pytesseract.TesseractError: If Tesseract fails on the image.
            pytesseract.TesseractNotFoundError: If the binary is missing.
            RuntimeError: If recognition exceeds ``timeout``.
        """
        lang = lang or self.default_lang
        config = f"--psm {psm}"

        pil_image = Image.fromarray(image)
        text = pytesseract.image_to_string(
            pil_image, lang=lang, config=config, timeout=timeout
        )
        data = pytesseract.image_to_data(
            pil_image,
            lang=lang,
            config=config,
            timeout=timeout,
            output_type=pytesseract.Output.DICT,
        )

        words: list[OCRWord] = []
        for word_text, conf, line_num in zip(
            data["text"], data["conf"], data["line_num"]
        ):
            word_text = word_text.strip()
            conf = float(conf)
            if conf > 0 and word_text:
                words.append(
                    OCRWord(text=word_text, confidence=conf / 100.0, line_num=line_num)
                )

        avg_conf = sum(w.confidence for w in words) / len(words) if words else 0.0

        logger.info(
            "OCR recognized %d words with average confidence %.2f",
            len(words),
            avg_conf,
        )
        return OCRResult(text=text, words=words, language=lang, confidence=avg_conf)
