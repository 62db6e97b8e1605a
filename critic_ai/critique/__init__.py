# Comment-anchoring core: persona registry, response normalizer,
# span resolver, annotation set builder, and the orchestrator.

from .types import AnnotationSet, CandidateAnnotation, FeedbackMode, Persona, ResolvedAnnotation
from .personas import PersonaRegistry, load_personas
from .normalizer import normalize_response
from .resolver import resolve_spans
from .builder import build_annotation_set
from .orchestrator import FeedbackOrchestrator

__all__ = [
    "AnnotationSet",
    "CandidateAnnotation",
    "FeedbackMode",
    "Persona",
    "ResolvedAnnotation",
    "PersonaRegistry",
    "load_personas",
    "normalize_response",
    "resolve_spans",
    "build_annotation_set",
    "FeedbackOrchestrator",
]
