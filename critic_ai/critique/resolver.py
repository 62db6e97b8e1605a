# ============================================================
# critique/resolver.py
# ------------------------------------------------------------
# Anchor one persona's candidate quotes to character ranges in
# the original document.
#
# A single search cursor starts at 0 and only moves forward.
# Each quote is searched literally from the cursor; on a hit
# the cursor jumps to the end of the match, on a miss the
# candidate is dropped. Consequences:
#   - ranges from one pass never overlap and never regress
#   - a repeated phrase consumes successive occurrences
#   - a quote that only occurs before the cursor is lost
#     (known limitation; no rescan from offset 0)
# ============================================================

from __future__ import annotations

import logging
from typing import List, Sequence

from .types import CandidateAnnotation, ResolvedAnnotation

logger = logging.getLogger(__name__)

QUOTE_PAIRS = {
    '"': '"',
    "'": "'",
    "“": "”",  # curly double
    "‘": "’",  # curly single
}


def clean_quote(text: str) -> str:
    """Strip surrounding matched quote marks, then surrounding whitespace."""
    text = (text or "").strip()
    while len(text) >= 2 and QUOTE_PAIRS.get(text[0]) == text[-1]:
        text = text[1:-1].strip()
    return text


def resolve_spans(
    document: str,
    candidates: Sequence[CandidateAnnotation],
    persona_id: str,
) -> List[ResolvedAnnotation]:
    resolved: List[ResolvedAnnotation] = []
    cursor = 0

    for cand in candidates:
        if cand.fallback:
            # synthesized from document[0:n] by the normalizer
            if cursor > 0:
                continue
            end = min(len(cand.quoted_text), len(document))
            resolved.append(
                ResolvedAnnotation(
                    persona_id=persona_id,
                    quoted_text=document[:end],
                    comment=cand.comment,
                    start=0,
                    end=end,
                    fallback=True,
                )
            )
            cursor = end
            continue

        quote = clean_quote(cand.quoted_text)
        if not quote:
            logger.debug("[%s] dropped empty quote", persona_id)
            continue

        pos = document.find(quote, cursor)
        if pos == -1:
            logger.debug("[%s] quote not found after offset %d: %r", persona_id, cursor, quote[:60])
            continue

        end = pos + len(quote)
        resolved.append(
            ResolvedAnnotation(
                persona_id=persona_id,
                quoted_text=quote,
                comment=cand.comment,
                start=pos,
                end=end,
            )
        )
        cursor = end

    return resolved
