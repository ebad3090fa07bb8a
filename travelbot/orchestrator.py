# ============================================================
# Chat orchestration
# ------------------------------------------------------------
# One request, strictly in order:
#   fetch (full, or compact on failure) -> build prompt
#   -> size guard (compact re-fetch + rebuild if too large)
#   -> generate -> answer
# Nothing is kept between requests.
# ============================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .generate import ChatGenerator
from .search import DataAggregator, PromptMode
from .search import prompts
from .search.types import AggregatedData, CollectionData

logger = logging.getLogger(__name__)


class InvalidQuestionError(ValueError):
    pass


@dataclass
class ChatResult:
    answer: str
    mode: PromptMode
    prompt: str


class ChatOrchestrator:
    def __init__(
        self,
        aggregator: DataAggregator,
        generator: ChatGenerator,
        max_prompt_tokens: int = prompts.DEFAULT_MAX_TOKENS,
    ):
        self.aggregator = aggregator
        self.generator = generator
        self.max_prompt_tokens = max_prompt_tokens

    @staticmethod
    def clean_question(question) -> str:
        if not isinstance(question, str) or not question.strip():
            raise InvalidQuestionError('Please provide a valid "question" in the request body')
        return question.strip()

    async def _retrieve(self, question: str) -> tuple[Union[AggregatedData, CollectionData], PromptMode]:
        try:
            return await self.aggregator.get_directus_data(question), PromptMode.FULL
        except Exception as e:
            logger.error("[Chatbot] Error fetching Directus data: %s", e)
            # a failure here propagates to the caller
            return await self.aggregator.get_directus_data_compact(question), PromptMode.COMPACT

    async def build_prompt(self, question: str) -> tuple[str, PromptMode]:
        logger.info("[Chatbot] Fetching data from Directus...")
        data, mode = await self._retrieve(question)

        logger.info("[Chatbot] Building augmented prompt (%s mode)...", mode.value)
        prompt = prompts.build(question, data, mode)

        if not prompts.validate_prompt_size(prompt, self.max_prompt_tokens):
            logger.info(
                "[Chatbot] Prompt too large (~%d tokens), switching to compact mode...",
                prompts.estimate_tokens(prompt),
            )
            compact = await self.aggregator.get_directus_data_compact(question)
            mode = PromptMode.COMPACT
            prompt = prompts.build(question, compact, mode)

        return prompt, mode

    async def answer(self, question) -> ChatResult:
        question = self.clean_question(question)
        logger.info('[Chatbot] Received question: "%s"', question)

        prompt, mode = await self.build_prompt(question)

        logger.info("[Chatbot] Sending request to the model...")
        out = await self.generator.complete_async(prompt)
        logger.info("[Chatbot] Response generated successfully")

        return ChatResult(
            answer=out.text,
            mode=mode,
            prompt=prompt,
        )
