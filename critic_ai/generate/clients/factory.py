# Pick the model client named by settings.MODEL_BACKEND.

from typing import Optional

from critic_ai.errors import ProviderConfigError
from critic_ai.settings import Settings, settings as default_settings
from ..types import ModelClient
from .echo_dev_client import EchoDevClient


def build_model_client(config: Optional[Settings] = None) -> ModelClient:
    cfg = config or default_settings
    backend = (cfg.MODEL_BACKEND or "openai").lower()

    if backend == "ollama":
        from .ollama_client import OllamaClient
        return OllamaClient(model=cfg.OLLAMA_MODEL, host=cfg.OLLAMA_HOST, timeout=cfg.REQUEST_TIMEOUT)
    if backend == "echo":
        return EchoDevClient()
    if backend == "openai":
        from .openai_client import OpenAIClient
        return OpenAIClient(model=cfg.OPENAI_MODEL, api_key=cfg.OPENAI_API_KEY, timeout=cfg.REQUEST_TIMEOUT)
    raise ProviderConfigError(f"Unknown MODEL_BACKEND: {cfg.MODEL_BACKEND!r}")
