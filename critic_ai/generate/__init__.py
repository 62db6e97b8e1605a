# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import CritiqueGenerator
from .types import Message, ModelParams, ModelClient
from .clients.echo_dev_client import EchoDevClient
from .clients.factory import build_model_client

__all__ = ["CritiqueGenerator", "Message", "ModelParams", "ModelClient", "EchoDevClient", "build_model_client"]
