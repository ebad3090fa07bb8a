# Client for OpenAI Chat Completions API.
# Follows the same interface as GeminiClient.

from typing import List, Tuple, Dict, Any, Optional

import openai
from openai import OpenAI

from ..types import LLMError, Message, ModelParams, ProviderErrorKind, classify_message


class OpenAIClient:
    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini"):
        self.model = model
        self.client = OpenAI(api_key=api_key) if api_key else None

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        if self.client is None:
            raise LLMError(ProviderErrorKind.AUTH_CONFIG, "OpenAI API key not configured")
        formatted = [{"role": m.role, "content": m.content} for m in messages]
        kwargs = {}
        if params.max_tokens:
            kwargs["max_tokens"] = params.max_tokens
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=formatted,
                temperature=params.temperature or 0.3,
                **kwargs,
            )
        except openai.RateLimitError as e:
            raise LLMError(ProviderErrorKind.RATE_LIMITED, str(e)) from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise LLMError(ProviderErrorKind.AUTH_CONFIG, str(e)) from e
        except openai.OpenAIError as e:
            raise LLMError(classify_message(str(e)), str(e)) from e
        text = resp.choices[0].message.content or ""
        meta = {"engine": "openai", "model": self.model}
        return text, meta
