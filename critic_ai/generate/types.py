# Simple, typed dataclasses shared across generator modules and model clients.

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, List, Tuple, Dict, Any


@dataclass
class Message:
    """Single chat turn: system, user, or assistant."""
    role: str
    content: str


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class ModelClient(Protocol):
    """What every client in generate/clients/ provides."""
    model: str

    def ensure_configured(self) -> None: ...

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]: ...
