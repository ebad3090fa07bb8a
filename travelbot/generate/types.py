# Simple, typed dataclasses shared across generator modules.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


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


@dataclass
class ChatResponse:
    """Final response from the generator."""
    text: str
    meta: Dict[str, Any]


class ProviderErrorKind(str, Enum):
    AUTH_CONFIG = "auth_config"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


class LLMError(Exception):
    """Provider failure, already classified by the client adapter."""

    def __init__(self, kind: ProviderErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


def classify_message(message: str) -> ProviderErrorKind:
    """Fallback for SDK errors that carry no structured status."""
    text = (message or "").lower()
    if "api key" in text:
        return ProviderErrorKind.AUTH_CONFIG
    if "quota" in text or "rate limit" in text:
        return ProviderErrorKind.RATE_LIMITED
    return ProviderErrorKind.OTHER


def classify_status(status: Optional[int]) -> Optional[ProviderErrorKind]:
    if status in (401, 403):
        return ProviderErrorKind.AUTH_CONFIG
    if status == 429:
        return ProviderErrorKind.RATE_LIMITED
    return None
