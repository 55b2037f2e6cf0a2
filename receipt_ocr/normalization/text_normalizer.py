"""OCR text normalization applied before field extraction.

Repairs the recognizer failure modes that break the amount and date
patterns: misread currency symbols, stray spaces around decimal marks,
and letters read in place of digits.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)

CURRENCY_MARKER = "R$"

_DIGIT_CONFUSIONS: dict[str, str] = {
    "O": "0",
    "o": "0",
    "S": "5",
    "s": "5",
    "B": "8",
    "b": "8",
    "I": "1",
    "l": "1",
}


@dataclass(frozen=True)
class NormalizationStep:
    """A single named regex substitution."""

    name: str
    pattern: re.Pattern[str]
    replacement: str | Callable[[re.Match[str]], str]

    def apply(self, text: str) -> str:
        """Return ``text`` with this step's substitution applied once."""
        return self.pattern.sub(self.replacement, text)


# Order matters: each step sees the output of the previous one.
NORMALIZATION_STEPS: tuple[NormalizationStep, ...] = (
    NormalizationStep(
        name="currency_symbol",
        # R$, RS or R5 directly before digits, punctuation or whitespace.
        pattern=re.compile(r"R[$S5](?![^\W\d_])", re.IGNORECASE),
        replacement=CURRENCY_MARKER,
    ),
    NormalizationStep(
        name="decimal_spacing",
        pattern=re.compile(r"(\d)[^\S\n]*([,.])[^\S\n]*(\d{2})"),
        replacement=r"\1\2\3",
    ),
    NormalizationStep(
        name="digit_confusion",
        # A lone letter inside a number, e.g. "1O,90" or "2S4".
        pattern=re.compile(r"(?<=\d)[OoSsBbIl](?=\d|[,.]\d)"),
        replacement=lambda match: _DIGIT_CONFUSIONS[match.group(0)],
    ),
)


def normalize_text(raw_text: str) -> str:
    """Rewrite raw OCR text so the field patterns match reliably.

    Each step runs exactly once, in order. Line breaks are never consumed,
    so line-oriented extractors see the same lines before and after.

    Args:
        raw_text: Unprocessed OCR transcript, possibly empty.

    Returns:
        Normalized text. Never raises for string input.
    """
    text = raw_text or ""
    for step in NORMALIZATION_STEPS:
        updated = step.apply(text)
        if updated != text:
            logger.debug("Normalization step %s rewrote the text", step.name)
        text = updated
    return text
