# ============================================================
# generate/generator.py
# ------------------------------------------------------------
# CritiqueGenerator: persona + document -> raw model text.
# It does not parse or anchor anything; that is critique/'s job.
# ============================================================

from __future__ import annotations

import logging
from typing import Optional

from critic_ai.critique.prompts import (
    INSPIRE_SYSTEM_PROMPT,
    build_inspire_prompt,
    build_system_prompt,
    build_user_prompt,
)
from critic_ai.critique.types import FeedbackMode, Persona
from critic_ai.settings import Settings, settings as default_settings
from .types import Message, ModelClient, ModelParams

logger = logging.getLogger(__name__)

INSPIRE_APOLOGY = " I'm having trouble generating a suggestion right now."


class CritiqueGenerator:
    def __init__(self, model_client: ModelClient, config: Optional[Settings] = None):
        self.model_client = model_client
        self.cfg = config or default_settings

    def ensure_ready(self) -> None:
        """Raise ProviderConfigError if the client cannot serve any request."""
        self.model_client.ensure_configured()

    def critique(self, persona: Persona, document: str, purpose: str = "", mode: FeedbackMode = FeedbackMode.COMPLETE) -> str:
        """One persona's raw reply. Provider errors propagate to the caller."""
        mode = FeedbackMode(mode)
        messages = [
            Message(role="system", content=build_system_prompt(persona.instructions, mode.value)),
            Message(role="user", content=build_user_prompt(document, purpose)),
        ]
        params = ModelParams(
            temperature=self.cfg.TEMPERATURE,
            max_tokens=self.cfg.max_tokens_for(mode.value),
        )
        text, meta = self.model_client.generate(messages, params)
        logger.debug("[%s] %s reply (%d chars)", persona.id, meta.get("engine", "?"), len(text))
        return text

    def next_sentence(self, document: str, purpose: str = "") -> str:
        """Continue the text with one sentence. Never raises on provider errors."""
        messages = [
            Message(role="system", content=INSPIRE_SYSTEM_PROMPT),
            Message(role="user", content=build_inspire_prompt(document, purpose)),
        ]
        params = ModelParams(temperature=self.cfg.TEMPERATURE, max_tokens=self.cfg.INSPIRE_MAX_TOKENS)
        try:
            text, _ = self.model_client.generate(messages, params)
        except Exception as e:
            logger.error("Error generating next sentence: %s", e)
            return INSPIRE_APOLOGY
        return text.strip()
