# Fan-out over the configured collections and merge into a dict keyed by name.

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from .directus import DirectusFetcher
from .types import AggregatedData, AggregateMetadata, CollectionData

logger = logging.getLogger(__name__)


class DataAggregator:
    def __init__(
        self,
        fetcher: DirectusFetcher,
        collections: List[str],
        include_unfiltered_context: bool = True,
    ):
        self.fetcher = fetcher
        self.collections = list(collections)
        self.include_unfiltered_context = include_unfiltered_context

    async def fetch_all(self, collections: List[str], search_query: str = "") -> CollectionData:
        """Fetch every collection concurrently; waits for all before returning."""
        results = await asyncio.gather(
            *(self.fetcher.fetch(name, search_query) for name in collections)
        )
        # gather preserves argument order, so keys follow the configured list
        return {name: records for name, records in zip(collections, results)}

    async def get_directus_data(self, question: str) -> AggregatedData:
        logger.info("Querying Directus collections: %s", ", ".join(self.collections))
        logger.info('Search query: "%s"', question)

        search_results = await self.fetch_all(self.collections, question)

        all_data: Optional[CollectionData] = None
        if self.include_unfiltered_context:
            # second pass without search so context exists even when nothing matched
            all_data = await self.fetch_all(self.collections, "")

        return AggregatedData(
            search_results=search_results,
            all_data=all_data,
            metadata=AggregateMetadata(
                query=question,
                timestamp=datetime.now(timezone.utc).isoformat(),
                collections=list(self.collections),
            ),
        )

    async def get_directus_data_compact(self, question: str) -> CollectionData:
        search_results = await self.fetch_all(self.collections, question)
        return {name: records for name, records in search_results.items() if records}
