# ============================================================
# critique/orchestrator.py
# ------------------------------------------------------------
# Fan-out / fan-in over all personas for one feedback request:
#   validate -> check provider -> per persona, concurrently:
#     generate -> normalize -> resolve (or fall back)
#   -> merge into one AnnotationSet
# Per-persona failures never escape; only request validation
# and provider configuration errors reach the caller.
# ============================================================

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Union

from critic_ai.errors import FeedbackRequestError
from .builder import build_annotation_set
from .normalizer import fallback_candidate, normalize_response
from .personas import PersonaRegistry, load_personas
from .resolver import resolve_spans
from .types import AnnotationSet, FeedbackMode, Persona, ResolvedAnnotation

if TYPE_CHECKING:
    from critic_ai.generate.generator import CritiqueGenerator

logger = logging.getLogger(__name__)

TRANSPORT_FALLBACK_SPAN = 30
TRANSPORT_APOLOGY = "I'm having trouble providing feedback right now. Please try again."


def transport_fallback(persona_id: str, document: str) -> ResolvedAnnotation:
    end = min(TRANSPORT_FALLBACK_SPAN, len(document))
    return ResolvedAnnotation(
        persona_id=persona_id,
        quoted_text=document[:end],
        comment=TRANSPORT_APOLOGY,
        start=0,
        end=end,
        fallback=True,
    )


def parse_mode(mode: Union[str, FeedbackMode, None]) -> FeedbackMode:
    if mode is None or mode == "":
        return FeedbackMode.COMPLETE
    try:
        return FeedbackMode(mode)
    except ValueError:
        raise FeedbackRequestError(f"Unknown feedback type: {mode!r}") from None


class FeedbackOrchestrator:
    def __init__(self, generator: "CritiqueGenerator", registry: Optional[PersonaRegistry] = None):
        self.generator = generator
        self.registry = registry or load_personas()

    async def _critique(self, persona: Persona, document: str, purpose: str, mode: FeedbackMode) -> List[ResolvedAnnotation]:
        try:
            raw = await asyncio.to_thread(self.generator.critique, persona, document, purpose, mode)
        except Exception as e:
            logger.warning("Error generating comments for %s: %s", persona.id, e)
            return [transport_fallback(persona.id, document)]

        try:
            candidates = normalize_response(raw, document)
            resolved = resolve_spans(document, candidates, persona.id)
        except Exception as e:
            logger.warning("Error anchoring comments for %s: %s", persona.id, e)
            return resolve_spans(document, [fallback_candidate(document)], persona.id)

        logger.info("[%s] %d/%d comment(s) anchored", persona.id, len(resolved), len(candidates))
        return resolved

    async def run(
        self,
        document: Optional[str],
        purpose: Optional[str] = "",
        mode: Union[str, FeedbackMode, None] = FeedbackMode.COMPLETE,
    ) -> AnnotationSet:
        if not document or not document.strip():
            raise FeedbackRequestError("Text is required")
        mode = parse_mode(mode)
        self.generator.ensure_ready()

        personas = list(self.registry)
        results = await asyncio.gather(
            *(self._critique(p, document, purpose or "", mode) for p in personas),
            return_exceptions=True,
        )

        per_persona = {}
        for persona, result in zip(personas, results):
            if isinstance(result, BaseException):
                logger.error("Persona %s failed: %s", persona.id, result)
                per_persona[persona.id] = [transport_fallback(persona.id, document)]
            else:
                per_persona[persona.id] = result
        return build_annotation_set(
            per_persona,
            self.registry,
        )

    def run_sync(self, document: Optional[str], purpose: Optional[str] = "", mode: Union[str, FeedbackMode, None] = FeedbackMode.COMPLETE) -> AnnotationSet:
        """Blocking wrapper for scripts and tests without an event loop."""
        return asyncio.run(self.run(document, purpose, mode))
