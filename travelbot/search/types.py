# Data models for the retrieval layer.
# Records coming back from Directus are opaque dicts and pass through as-is.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]
CollectionData = Dict[str, List[Record]]


class PromptMode(str, Enum):
    FULL = "full"
    COMPACT = "compact"


@dataclass
class CollectionFetch:
    """Outcome of one collection read: records, or the reason it was unavailable."""
    collection: str
    records: List[Record] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def unavailable(cls, collection: str, reason: str) -> "CollectionFetch":
        return cls(collection=collection, records=[], reason=reason)


@dataclass
class AggregateMetadata:
    query: str
    timestamp: str
    collections: List[str]


@dataclass
class AggregatedData:
    """Full-mode retrieval result: search hits plus unfiltered context."""
    search_results: CollectionData
    # None when unfiltered context is switched off
    all_data: Optional[CollectionData]
    metadata: AggregateMetadata

    def prompt_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"relevantResults": self.search_results}
        if self.all_data is not None:
            payload["availableData"] = self.all_data
        return payload

