"""Total amount extraction from normalized receipt text.

Every decimal number with exactly two fractional digits is a candidate.
Candidates are scored against their surrounding text and the best one
is taken as the receipt total.
"""

import re
from dataclasses import dataclass, replace
from decimal import Decimal

from receipt_ocr.normalization.text_normalizer import CURRENCY_MARKER
from receipt_ocr.utils.config import ExtractionConfig
from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)

KEYWORD_BONUS = 3
CURRENCY_BONUS = 2
LARGEST_VALUE_BONUS = 1

_AMOUNT_PATTERN = re.compile(
    r"(?:R\$[^\S\n]*)?"
    r"(?<!\d)(?P<integer>\d{1,3}(?:[. \t]\d{3})+|\d+)"
    r"[,.](?P<cents>\d{2})(?!\d)"
)
_GROUP_SEPARATORS = re.compile(r"[. \t]")


@dataclass(frozen=True)
class AmountCandidate:
    """One monetary value found in the text, with its plausibility score."""

    value: Decimal
    value_text: str
    score: int
    position: int
    end: int  # offset just past the two decimal digits


def find_amount_candidates(text: str) -> list[AmountCandidate]:
    """Find every amount-shaped number in the text, unscored.

    Args:
        text: Normalized receipt text.

    Returns:
        Candidates in order of appearance, each with a score of zero.
    """
    candidates: list[AmountCandidate] = []
    for match in _AMOUNT_PATTERN.finditer(text):
        integer = _GROUP_SEPARATORS.sub("", match.group("integer"))
        value_text = f"{integer}.{match.group('cents')}"
        candidates.append(
            AmountCandidate(
                value=Decimal(value_text),
                value_text=value_text,
                score=0,
                position=match.start("integer"),
                end=match.end(),
            )
        )
    return candidates


def _has_keyword(window: str, keywords: list[str]) -> bool:
    return any(keyword in window for keyword in keywords)


def score_candidates(
    text: str,
    candidates: list[AmountCandidate],
    config: ExtractionConfig | None = None,
) -> list[AmountCandidate]:
    """Score candidates against the text around them.

    Scores are additive: a total keyword near the number, a currency
    marker right before it, and being the largest value on the receipt
    each add points. The input list is left untouched.

    Args:
        text: Normalized receipt text the candidates were found in.
        candidates: Unscored candidates from :func:`find_amount_candidates`.
        config: Extraction heuristics. Defaults to :class:`ExtractionConfig`.

    Returns:
        New candidates carrying their scores, in the input order.
    """
    if not candidates:
        return []

    config = config or ExtractionConfig()
    lowered = text.lower()
    keywords = [keyword.lower() for keyword in config.total_keywords]
    marker = CURRENCY_MARKER.lower()
    largest = max(candidate.value for candidate in candidates)

    scored: list[AmountCandidate] = []
    for candidate in candidates:
        start, end = candidate.position, candidate.end
        window = lowered[
            max(0, start - config.context_window) : end + config.context_window
        ]
        prefix = lowered[
            max(0, start - config.currency_max_distance - len(marker)) : start
        ]

        score = 0
        if _has_keyword(window, keywords):
            score += KEYWORD_BONUS
        if marker in prefix:
            score += CURRENCY_BONUS
        if candidate.value == largest:
            score += LARGEST_VALUE_BONUS
        scored.append(replace(candidate, score=score))
    return scored


def rank_candidates(candidates: list[AmountCandidate]) -> list[AmountCandidate]:
    """Order candidates best first: highest score, then latest in the text."""
    return sorted(
        candidates,
        key=lambda candidate: (candidate.score, candidate.position),
        reverse=True,
    )


def rank_amount_candidates(
    text: str, config: ExtractionConfig | None = None
) -> list[AmountCandidate]:
    """Find, score, and rank all amount candidates in normalized text."""
    candidates = find_amount_candidates(text)
    return rank_candidates(score_candidates(text, candidates, config))


def extract_amount(text: str, config: ExtractionConfig | None = None) -> Decimal | None:
    """Pick the most plausible receipt total.

    Args:
        text: Normalized receipt text.
        config: Extraction heuristics.

    Returns:
        The winning value with its two captured decimal digits, or ``None``
        when the text holds no amount-shaped number.
    """
    ranked = rank_amount_candidates(text, config)
    if not ranked:
        logger.debug("No amount candidates found")
        return None

    best = ranked[0]
    logger.debug(
        "Selected amount %s (score %d) out of %d candidates",
        best.value_text,
        best.score,
        len(ranked),
    )
    return best.value
