# ChatGenerator:
# - accepts any model client (Gemini, OpenAI, Ollama, Echo)
# - sends the fully assembled RAG prompt as a single user turn
# - guarantees that failures surface as LLMError

from __future__ import annotations
import logging
import os
from typing import Optional

import yaml
from fastapi.concurrency import run_in_threadpool

from .types import ChatResponse, LLMError, Message, ModelParams, ProviderErrorKind

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


class ChatGenerator:
    def __init__(self, model_client, config_path: Optional[str] = None):
        self.model_client = model_client
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.cfg = self._load_config()

    def _load_config(self):
        if not os.path.exists(self.config_path):
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def complete(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatResponse:
        """Blocking generation for one prompt."""
        messages = [Message(role="user", content=prompt)]
        params = ModelParams(
            temperature=temperature if temperature is not None else self.cfg.get("temperature", 0.3),
            max_tokens=max_tokens or self.cfg.get("max_tokens"),
        )
        try:
            text, meta = self.model_client.generate(messages, params)
        except LLMError:
            raise
        except Exception as e:
            logger.exception("Unclassified model client failure")
            raise LLMError(ProviderErrorKind.OTHER, str(e)) from e
        return ChatResponse(text=text, meta=meta)

    async def complete_async(self, prompt: str, **kwargs) -> ChatResponse:
        # SDK clients are synchronous; keep them off the event loop
        return await run_in_threadpool(self.complete, prompt, **kwargs)
