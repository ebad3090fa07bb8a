# Makes the folder importable as a package.
# Exports the Directus retrieval layer and prompt helpers for convenience.

from .aggregator import DataAggregator
from .directus import DirectusFetcher, build_directus_client
from .prompts import build, build_compact_prompt, build_prompt, estimate_tokens, validate_prompt_size
from .types import AggregatedData, CollectionFetch, PromptMode

__all__ = [
    "DataAggregator",
    "DirectusFetcher",
    "build_directus_client",
    "build",
    "build_prompt",
    "build_compact_prompt",
    "estimate_tokens",
    "validate_prompt_size",
    "AggregatedData",
    "CollectionFetch",
    "PromptMode",
]
