# ===============================================
# tests/conftest.py
# Shared fakes: scripted model clients so no test
# talks to a real provider.
# ===============================================
import json
import sys
import threading
import time
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from critic_ai.critique import load_personas
from critic_ai.errors import ProviderConfigError
from critic_ai.generate import CritiqueGenerator
from critic_ai.settings import Settings


def persona_of(messages):
    """Which persona a system prompt belongs to (by the name in its first line)."""
    system = messages[0].content
    for p in load_personas():
        if system.startswith(p.instructions):
            return p.id
    return None


class ScriptedClient:
    """
    Replies per persona id. A reply may be a string, an Exception
    (raised), or a callable(messages, params) -> str.
    """

    def __init__(self, replies=None, default="[]", delays=None, configured=True):
        self.model = "scripted"
        self.replies = replies or {}
        self.default = default
        self.delays = delays or {}
        self.configured = configured
        self.calls = []
        self._lock = threading.Lock()

    def ensure_configured(self):
        if not self.configured:
            raise ProviderConfigError("API key not configured")

    def generate(self, messages, params):
        pid = persona_of(messages)
        with self._lock:
            self.calls.append((pid, messages, params))
        time.sleep(self.delays.get(pid, 0))
        reply = self.replies.get(pid, self.default)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(messages, params)
        return reply, {"engine": "scripted", "model": self.model}


def comments_json(*quotes):
    return json.dumps([{"selectedText": q, "comment": f"about {q}"} for q in quotes])


@pytest.fixture
def registry():
    return load_personas()


@pytest.fixture
def cfg():
    return Settings(MODEL_BACKEND="echo", OPENAI_API_KEY=None, _env_file=None)


@pytest.fixture
def make_generator(cfg):
    def _make(client):
        return CritiqueGenerator(model_client=client, config=cfg)
    return _make
