"""Transaction date extraction for day/month/year receipts."""

import datetime as dt
import re

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)

# dd/mm/yyyy or dd-mm-yyyy, not embedded in a longer digit run.
_DATE_PATTERN = re.compile(r"(?<!\d)(\d{2})[/-](\d{2})[/-](\d{4})(?!\d)")


def extract_date(text: str) -> dt.date | None:
    """Return the first day/month/year date found in the text.

    Only the first date-shaped match is considered. If its components do
    not form a real calendar date (``31/02/2024``) the date is treated as
    absent rather than guessed.

    Args:
        text: Normalized receipt text.

    Returns:
        The parsed date, or ``None``.
    """
    match = _DATE_PATTERN.search(text)
    if not match:
        return None

    day, month, year = (int(group) for group in match.groups())
    try:
        return dt.date(year, month, day)
    except ValueError:
        logger.debug("Ignoring out-of-range date %s", match.group(0))
        return None
