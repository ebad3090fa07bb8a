# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import ChatGenerator
from .types import ChatResponse, LLMError, Message, ModelParams, ProviderErrorKind
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "ChatGenerator",
    "ChatResponse",
    "LLMError",
    "Message",
    "ModelParams",
    "ProviderErrorKind",
    "EchoDevClient",
]
