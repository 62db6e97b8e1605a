# ============================================================
# critique/builder.py
# ------------------------------------------------------------
# Merge per-persona resolved lists into one AnnotationSet.
# Cross-persona overlap is kept as-is; only the order changes.
# ============================================================

from __future__ import annotations
from typing import Mapping, Sequence

from critic_ai.errors import UnknownPersonaError
from .personas import PersonaRegistry
from .types import AnnotationSet, ResolvedAnnotation


def build_annotation_set(
    per_persona: Mapping[str, Sequence[ResolvedAnnotation]],
    registry: PersonaRegistry,
) -> AnnotationSet:
    """
    Concatenate in registration order, then stable-sort by (start, persona rank).
    Within one persona the resolver already emits ascending, non-overlapping
    ranges, so the stable sort keeps that order. Arrival order of the
    per-persona results does not matter.
    """
    for persona_id in per_persona:
        if persona_id not in registry:
            raise UnknownPersonaError(persona_id)

    merged = []
    for persona_id in registry.ids():
        merged.extend(per_persona.get(persona_id, ()))

    merged.sort(key=lambda a: (a.start, registry.rank(a.persona_id)))
    return AnnotationSet(annotations=merged)
