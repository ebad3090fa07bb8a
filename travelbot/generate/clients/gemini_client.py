# Client for Google Gemini via the google-generativeai SDK.
# Same interface as the other clients: generate(messages, params).

import logging
from typing import Any, Dict, List, Optional, Tuple

from google.api_core import exceptions as google_exceptions

from ..types import LLMError, Message, ModelParams, ProviderErrorKind, classify_message

logger = logging.getLogger(__name__)


class GeminiClient:
    def __init__(self, api_key: Optional[str], model: str = "gemini-pro"):
        self.api_key = api_key
        self.model = model
        self._model_obj = None

    def _get_model(self):
        if self._model_obj is None:
            import google.generativeai as genai

            if not self.api_key:
                raise LLMError(ProviderErrorKind.AUTH_CONFIG, "Gemini API key not configured")
            genai.configure(api_key=self.api_key)
            self._model_obj = genai.GenerativeModel(self.model)
            logger.info("Gemini client initialized: %s", self.model)
        return self._model_obj

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        model = self._get_model()
        # Gemini takes a single text prompt
        prompt = "\n\n".join(m.content for m in messages)
        generation_config = {"temperature": float(params.temperature or 0.3)}
        if params.max_tokens:
            generation_config["max_output_tokens"] = int(params.max_tokens)
        try:
            resp = model.generate_content(prompt, generation_config=generation_config)
            text = resp.text
        except (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests) as e:
            raise LLMError(ProviderErrorKind.RATE_LIMITED, str(e)) from e
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as e:
            raise LLMError(ProviderErrorKind.AUTH_CONFIG, str(e)) from e
        except Exception as e:
            # e.g. InvalidArgument("API key not valid") carries no dedicated type
            raise LLMError(classify_message(str(e)), str(e)) from e
        return text, {"engine": "gemini", "model": self.model}
