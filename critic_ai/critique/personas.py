# ============================================================
# critique/personas.py
# ------------------------------------------------------------
# Read-only persona registry, loaded once from personas.yaml.
# ============================================================

from __future__ import annotations

import os
from functools import lru_cache
from typing import Iterator, Optional, Tuple

import yaml

from critic_ai.errors import UnknownPersonaError
from .types import Persona

DEFAULT_PERSONAS_PATH = os.path.join(os.path.dirname(__file__), "personas.yaml")


class PersonaRegistry:
    """Immutable, ordered table of personas. Iteration follows registration order."""

    def __init__(self, personas: Tuple[Persona, ...]):
        ids = [p.id for p in personas]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate persona ids: {ids}")
        self._personas = tuple(personas)
        self._rank = {pid: i for i, pid in enumerate(ids)}

    def __iter__(self) -> Iterator[Persona]:
        return iter(self._personas)

    def __len__(self) -> int:
        return len(self._personas)

    def __contains__(self, persona_id: object) -> bool:
        return persona_id in self._rank

    def ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self._personas)

    def get(self, persona_id: str) -> Persona:
        if persona_id not in self._rank:
            raise UnknownPersonaError(persona_id)
        return self._personas[self._rank[persona_id]]

    def rank(self, persona_id: str) -> int:
        """Registration position, used as the ordering tie-break."""
        if persona_id not in self._rank:
            raise UnknownPersonaError(persona_id)
        return self._rank[persona_id]


def parse_personas(data: dict) -> PersonaRegistry:
    personas = []
    for key, p in (data or {}).items():
        p = p or {}
        personas.append(
            Persona(
                id=str(key),
                display_name=p.get("name", key),
                role=p.get("role", ""),
                instructions=(p.get("instructions") or "").strip(),
            )
        )
    return PersonaRegistry(tuple(personas))


@lru_cache(maxsize=4)
def load_personas(path: Optional[str] = None) -> PersonaRegistry:
    """Load the registry from YAML. Cached, so every caller shares one instance."""
    path = path or DEFAULT_PERSONAS_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"personas.yaml not found at {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return parse_personas(data)
