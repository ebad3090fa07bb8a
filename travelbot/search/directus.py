# Read-only access to Directus collections.
# A failed read is logged and reported as an unavailable CollectionFetch;
# fetch() coalesces that to an empty list so callers always get a sequence.

from __future__ import annotations

import logging
from typing import List

import httpx

from .types import CollectionFetch, Record

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 100


def build_directus_client(base_url: str, token: str, timeout: float = 30.0) -> httpx.AsyncClient:
    """AsyncClient preconfigured with the Directus base URL and bearer auth."""
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        },
        timeout=timeout,
    )


class DirectusFetcher:
    def __init__(self, client: httpx.AsyncClient, page_limit: int = DEFAULT_PAGE_LIMIT):
        self.client = client
        self.page_limit = page_limit

    def _params(self, search_query: str) -> dict:
        params = {"limit": self.page_limit}
        if search_query and search_query.strip():
            # httpx url-encodes query params
            params["search"] = search_query
        return params

    async def fetch_outcome(self, collection: str, search_query: str = "") -> CollectionFetch:
        if not collection or not collection.strip():
            raise ValueError("collection name must be non-empty")

        try:
            resp = await self.client.get(f"/items/{collection}", params=self._params(search_query))
        except httpx.HTTPError as e:
            logger.error("Error fetching collection %s: %s", collection, e)
            return CollectionFetch.unavailable(collection, f"request failed: {e}")

        if not resp.is_success:
            logger.error("Error fetching %s: %s %s", collection, resp.status_code, resp.text[:500])
            return CollectionFetch.unavailable(collection, f"HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            logger.error("Malformed response for %s: %s", collection, e)
            return CollectionFetch.unavailable(collection, "malformed JSON body")

        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            return CollectionFetch(collection=collection, records=[])
        if not isinstance(data, list):
            logger.error("Unexpected 'data' type for %s: %s", collection, type(data).__name__)
            return CollectionFetch.unavailable(collection, "'data' is not a list")
        return CollectionFetch(collection=collection, records=data)

    async def fetch(self, collection: str, search_query: str = "") -> List[Record]:
        outcome = await self.fetch_outcome(collection, search_query)
        return outcome.records
