"""Lexical relevance scoring of supporting quotes against a draft paragraph."""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from guardrail.drafting.models import CitationSuggestion, SupportCandidate

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
NOISE_THRESHOLD = 0.1
MAX_QUOTE_LENGTH = 240
ELLIPSIS = "..."
MIN_TERM_LENGTH = 4

_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")


# ── Public API ───────────────────────────────────────────────────────


def score_supports(
    paragraph: str,
    candidates: Iterable[SupportCandidate | Mapping[str, Any]] | None,
    max_suggestions: int = MAX_SUGGESTIONS,
    noise_threshold: float = NOISE_THRESHOLD,
) -> list[CitationSuggestion]:
    """Rank candidate quotes by lexical overlap with ``paragraph``.

    Returns at most ``max_suggestions`` suggestions with relevance above
    ``noise_threshold``, best first. Equal scores keep candidate order.
    """
    supports = _coerce_candidates(candidates)
    if not supports:
        return []

    terms = key_terms(paragraph)
    idf_weight = math.log(1 + len(supports) / 3)

    scored: list[CitationSuggestion] = []
    for support in supports:
        quote = support.quote.lower()
        matched = sum(1 for term in terms if term in quote)
        idf = matched * idf_weight

        base = matched / len(terms) if terms else 0.0
        relevance = min(1.0, base * (1 + idf / (10 + len(terms))))

        scored.append(
            CitationSuggestion(
                support_id=support.id,
                quote=truncate_quote(support.quote),
                relevance=round(relevance, 3),
                reason=f"Matched {matched} key terms" if matched else None,
            )
        )

    ranked = sorted(
        (s for s in scored if s.relevance > noise_threshold),
        key=lambda s: s.relevance,
        reverse=True,
    )
    logger.debug(
        "Scored %d candidates against %d key terms — %d above threshold",
        len(supports), len(terms), len(ranked),
    )
    return ranked[:max_suggestions]


# ── Helpers ──────────────────────────────────────────────────────────


def key_terms(paragraph: str) -> list[str]:
    """Distinct lowercase tokens longer than three characters, in first-seen order."""
    if not isinstance(paragraph, str):
        return []
    tokens = _NON_WORD_RE.sub(" ", paragraph.lower()).split()
    return list(dict.fromkeys(t for t in tokens if len(t) >= MIN_TERM_LENGTH))


def truncate_quote(quote: str) -> str:
    if len(quote) <= MAX_QUOTE_LENGTH:
        return quote
    return quote[: MAX_QUOTE_LENGTH - len(ELLIPSIS)] + ELLIPSIS


def _coerce_candidates(candidates: Any) -> list[SupportCandidate]:
    """Keep well-formed candidates; anything else is skipped, never raised."""
    if candidates is None or isinstance(candidates, (str, bytes, Mapping)):
        return []
    try:
        items = list(candidates)
    except TypeError:
        logger.debug("Candidates are not iterable: %r", type(candidates))
        return []

    supports: list[SupportCandidate] = []
    for item in items:
        if isinstance(item, SupportCandidate):
            supports.append(item)
            continue
        if isinstance(item, Mapping):
            support_id, quote = item.get("id"), item.get("quote")
            # Integer primary keys are common for stored supports.
            if isinstance(support_id, int) and not isinstance(support_id, bool):
                support_id = str(support_id)
            if isinstance(support_id, str) and support_id and isinstance(quote, str):
                supports.append(SupportCandidate(id=support_id, quote=quote))
                continue
        logger.warning("Skipping malformed support candidate: %r", item)
    return supports
