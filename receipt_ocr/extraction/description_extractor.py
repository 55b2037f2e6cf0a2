"""Short description extraction: the first meaningful line of a receipt."""

from receipt_ocr.utils.config import ExtractionConfig


def extract_description(text: str, config: ExtractionConfig | None = None) -> str | None:
    """Return the first line long enough to be a label, trimmed and truncated.

    Lines whose stripped length is at most ``description_min_length``
    are skipped as blank lines or OCR noise.
    """
    config = config or ExtractionConfig()
    for line in text.split("\n"):
        stripped = line.strip()
        if len(stripped) > config.description_min_length:
            return stripped[: config.description_max_length]
    return None
