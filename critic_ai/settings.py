# critic_ai/settings.py
import logging
import os
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Critic AI")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # provider
    OPENAI_API_KEY: Optional[str] = None
    MODEL_BACKEND: str = Field(default="openai")  # openai | ollama | echo
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="mistral:7b-instruct")
    REQUEST_TIMEOUT: float = Field(default=60.0)

    # generation budgets
    TEMPERATURE: float = Field(default=0.7)
    COMPLETE_MAX_TOKENS: int = Field(default=400)
    PROGRESS_MAX_TOKENS: int = Field(default=300)
    INSPIRE_MAX_TOKENS: int = Field(default=100)

    # http
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # optional override for critique/personas.yaml
    PERSONAS_PATH: Optional[str] = None

    # read root-level .env.dev
    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME

    def max_tokens_for(self, mode: str) -> int:
        return self.COMPLETE_MAX_TOKENS if mode == "complete" else self.PROGRESS_MAX_TOKENS


def configure_logging(level: Optional[str] = None) -> None:
    """Attach one stream handler to the package logger (idempotent)."""
    logger = logging.getLogger("critic_ai")
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(h)
    logger.setLevel((level or settings.LOG_LEVEL).upper())


settings = Settings()
