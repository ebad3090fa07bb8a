# Prompt templates for the closed-domain travel assistant,
# plus a rough size guard (~4 chars per token, no real tokenizer).

from __future__ import annotations

import json
import math
from typing import Any, Union

from .types import AggregatedData, CollectionData, PromptMode

DEFAULT_MAX_TOKENS = 30000

NOT_IN_DATA_REPLY = "I don't know based on our system data."
OFF_TOPIC_REPLY = "This information is not available in our system."

SYSTEM_INSTRUCTIONS = f"""\
You are the Travel Lebanon assistant.
You must answer ONLY using the Directus data provided below.
If the answer is not inside the data, say: "{NOT_IN_DATA_REPLY}"
Do NOT use any outside knowledge.
Do NOT hallucinate.
If the user asks something not related to Lebanon or not present in the data, answer: "{OFF_TOPIC_REPLY}"

Additional guidelines:
- Be friendly and helpful in your responses
- Format responses clearly for tourists
- Include relevant details like prices, locations, and ratings when available
- If multiple options match the query, present them clearly
- Keep responses concise but informative"""


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def format_directus_data(data: Union[AggregatedData, CollectionData]) -> str:
    if isinstance(data, AggregatedData):
        return _to_json(data.prompt_payload())
    return _to_json(data)


def build_prompt(question: str, data: Union[AggregatedData, CollectionData]) -> str:
    return f"""SYSTEM INSTRUCTIONS:
{SYSTEM_INSTRUCTIONS}

DIRECTUS DATA (JSON):
{format_directus_data(data)}

USER QUESTION:
{question}

Please provide a helpful response based ONLY on the data above."""


def build_compact_prompt(question: str, data: CollectionData) -> str:
    return f"""SYSTEM INSTRUCTIONS:
{SYSTEM_INSTRUCTIONS}

AVAILABLE DATA:
{_to_json(data)}

USER QUESTION:
{question}

Please provide a helpful, tourist-friendly response based ONLY on the data above."""


def build(question: str, data: Union[AggregatedData, CollectionData], mode: PromptMode) -> str:
    if mode == PromptMode.COMPACT:
        return build_compact_prompt(question, data)
    return build_prompt(question, data)


def estimate_tokens(prompt: str) -> int:
    return math.ceil(len(prompt) / 4)


def validate_prompt_size(prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> bool:
    return estimate_tokens(prompt) <= max_tokens
