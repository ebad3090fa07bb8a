# Client for Ollama local inference.
# Accepts model name and exposes generate(messages, params).

import requests
from typing import List, Tuple, Dict, Any

from ..types import LLMError, Message, ModelParams, ProviderErrorKind, classify_status


class OllamaClient:
    def __init__(self, host: str = "http://localhost:11434", model: str = "mistral:7b-instruct"):
        self.host = host.rstrip("/")
        self.model = model

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        prompt = self._compose_prompt(messages)
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": float(params.temperature or 0.3)},
        }
        if params.max_tokens:
            payload["options"]["num_predict"] = int(params.max_tokens)
        url = f"{self.host}/api/generate"
        try:
            resp = requests.post(url, json=payload, timeout=180)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise LLMError(classify_status(status) or ProviderErrorKind.OTHER, str(e)) from e
        except requests.RequestException as e:
            raise LLMError(ProviderErrorKind.OTHER, str(e)) from e
        data = resp.json()
        return data.get("response", ""), {"engine": "ollama", "model": self.model}

    def _compose_prompt(self, messages: List[Message]) -> str:
        # a single user turn is passed through untouched
        if len(messages) == 1:
            return messages[0].content
        parts = []
        for m in messages:
            parts.append(f"{m.role.upper()}:\n{m.content.strip()}\n")
        return "\n".join(parts)
