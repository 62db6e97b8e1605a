# ============================================================
# critique/normalizer.py
# ------------------------------------------------------------
# Raw model text -> list of CandidateAnnotation.
#   1) strip a ```lang opener and ``` closer
#   2) strict JSON parse (retry on the outermost [...] / {...}
#      slice when the model wrapped the JSON in prose)
#   3) accept a list of records or a single record
#   4) anything else -> one fallback candidate
# Never raises: the fallback is a normal return value.
# ============================================================

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .types import CandidateAnnotation

logger = logging.getLogger(__name__)

FALLBACK_SPAN = 50
FALLBACK_REPLY_MIN = 10
FALLBACK_REPLY_MAX = 100
APOLOGY = "I apologize, but I'm having trouble providing specific feedback right now. Please try again."

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")
_NOT_PARSED = object()


class CommentRecord(BaseModel):
    """One element of the model's JSON array."""
    model_config = ConfigDict(extra="ignore")

    selected_text: str = Field(validation_alias=AliasChoices("selectedText", "quotedText"))
    comment: str
    # model-claimed offsets; advisory only, never used for anchoring
    position: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["CommentRecord"]:
        if not isinstance(raw, dict):
            return None
        try:
            return cls.model_validate(raw)
        except ValidationError:
            return None


def strip_code_fence(text: str) -> str:
    text = (text or "").strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError, RecursionError):
        # RecursionError: pathologically nested input like "[" * 100000
        return _NOT_PARSED


def _outer_slice(text: str, open_ch: str, close_ch: str) -> Optional[str]:
    lo, hi = text.find(open_ch), text.rfind(close_ch)
    if lo == -1 or hi <= lo:
        return None
    return text[lo:hi + 1]


def parse_structured(text: str) -> Any:
    """Strict parse, then best-effort parse of the bracketed part of a prose-wrapped reply."""
    parsed = _loads(text)
    if parsed is not _NOT_PARSED:
        return parsed
    for open_ch, close_ch in (("[", "]"), ("{", "}")):
        chunk = _outer_slice(text, open_ch, close_ch)
        if chunk is None:
            continue
        parsed = _loads(chunk)
        if parsed is not _NOT_PARSED:
            return parsed
    return _NOT_PARSED


def fallback_comment(reply: str) -> str:
    """Use the model's reply as the comment only if it is short plain prose."""
    if reply and "{" not in reply and "[" not in reply and len(reply) > FALLBACK_REPLY_MIN:
        if len(reply) > FALLBACK_REPLY_MAX:
            return reply[:FALLBACK_REPLY_MAX] + "..."
        return reply
    return APOLOGY


def fallback_candidate(document: str, reply: str = "") -> CandidateAnnotation:
    return CandidateAnnotation(
        quoted_text=document[:min(FALLBACK_SPAN, len(document))],
        comment=fallback_comment(reply),
        fallback=True,
    )


def normalize_response(raw: str, document: str) -> List[CandidateAnnotation]:
    content = strip_code_fence(raw)
    parsed = parse_structured(content)

    if isinstance(parsed, dict):
        parsed = [parsed]
    if not isinstance(parsed, list):
        logger.warning("Unparseable model output, using fallback: %r", content[:200])
        return [fallback_candidate(document, content)]

    records = [CommentRecord.from_raw(item) for item in parsed]
    candidates = [
        CandidateAnnotation(quoted_text=r.selected_text, comment=r.comment)
        for r in records
        if r is not None
    ]
    if parsed and not candidates:
        logger.warning("Model output had no usable comment records, using fallback: %r", content[:200])
        return [fallback_candidate(document, content)]
    if len(candidates) < len(parsed):
        logger.debug("Skipped %d malformed comment record(s)", len(parsed) - len(candidates))
    return candidates
