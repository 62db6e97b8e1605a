# ============================================================
# critique/types.py
# ------------------------------------------------------------
# Data models for the comment-anchoring pipeline:
#   Persona -> CandidateAnnotation -> ResolvedAnnotation -> AnnotationSet
# ============================================================

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List


class FeedbackMode(str, Enum):
    """Shapes the generation request only; resolution is mode-agnostic."""
    COMPLETE = "complete"
    PROGRESS = "progress"


@dataclass(frozen=True)
class Persona:
    """A named critique personality with fixed instruction text."""
    id: str
    display_name: str
    role: str
    instructions: str


@dataclass(frozen=True)
class CandidateAnnotation:
    """Untrusted quote + comment pair parsed from model output."""
    quoted_text: str
    comment: str
    # set only on the synthesized placeholder for unparseable output
    fallback: bool = False


@dataclass(frozen=True)
class ResolvedAnnotation:
    """
    A comment anchored to document[start:end].
    Invariant: 0 <= start <= end <= len(document) and
    document[start:end] == quoted_text.
    """
    persona_id: str
    quoted_text: str
    comment: str
    start: int
    end: int
    fallback: bool = False

    @property
    def id(self) -> str:
        # start/end are unique within one persona's pass (no overlap, no empties)
        return f"{self.persona_id}-{self.start}-{self.end}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "personaId": self.persona_id,
            "quotedText": self.quoted_text,
            "comment": self.comment,
            "start": self.start,
            "end": self.end,
            "fallback": self.fallback,
        }


@dataclass
class AnnotationSet:
    """Annotations for one document, ordered by start then persona order."""
    annotations: List[ResolvedAnnotation] = field(default_factory=list)

    def __iter__(self) -> Iterator[ResolvedAnnotation]:
        return iter(self.annotations)

    def __len__(self) -> int:
        return len(self.annotations)

    def __getitem__(self, i: int) -> ResolvedAnnotation:
        return self.annotations[i]

    def for_persona(self, persona_id: str) -> List[ResolvedAnnotation]:
        return [a for a in self.annotations if a.persona_id == persona_id]

    def to_list(self) -> List[Dict[str, Any]]:
        return [a.to_dict() for a in self.annotations]
