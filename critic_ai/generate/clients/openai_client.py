# Client for the OpenAI Chat Completions API.
# Same interface as OllamaClient / EchoDevClient.

from typing import List, Tuple, Dict, Any, Optional
from openai import OpenAI

from critic_ai.errors import ProviderConfigError
from ..types import Message, ModelParams


class OpenAIClient:
    def __init__(self, model: str = "gpt-4o-mini", api_key: Optional[str] = None, timeout: float = 60.0):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self._client: Optional[OpenAI] = None

    def set_model(self, model: str):
        self.model = model

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ProviderConfigError("API key not configured")

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self.ensure_configured()
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        formatted = [{"role": m.role, "content": m.content} for m in messages]
        resp = self._get_client().chat.completions.create(
            model=self.model,
            messages=formatted,
            temperature=params.temperature if params.temperature is not None else 0.7,
            max_tokens=params.max_tokens or 400,
        )
        text = (resp.choices[0].message.content or "").strip()
        meta = {"engine": "openai", "model": self.model}
        return text, meta
