import asyncio

import httpx
import pytest

from travelbot.search import DataAggregator, DirectusFetcher

GROTTO = {"id": 1, "title": "Jeita Grotto"}


@pytest.mark.asyncio
async def test_fetch_all_absorbs_per_collection_failure(directus, make_aggregator):
    directus.add("Items", [GROTTO])
    directus.add("Drivers", status=500, body=b"internal error")
    aggregator = make_aggregator(["Items", "Drivers"])

    result = await aggregator.fetch_all(["Items", "Drivers"], "")

    assert result == {"Items": [GROTTO], "Drivers": []}


@pytest.mark.asyncio
async def test_fetch_all_keys_follow_configured_order(directus, make_aggregator):
    for name in ("Items", "Drivers", "Category", "SubCategory"):
        directus.add(name, [{"id": name}])
    aggregator = make_aggregator(["SubCategory", "Items", "Category", "Drivers"])

    result = await aggregator.fetch_all(aggregator.collections, "")

    assert list(result) == ["SubCategory", "Items", "Category", "Drivers"]


@pytest.mark.asyncio
async def test_fetch_all_runs_concurrently():
    in_flight = 0
    peak = 0

    class SlowFetcher:
        async def fetch(self, collection, search_query=""):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return [{"collection": collection}]

    aggregator = DataAggregator(SlowFetcher(), ["A", "B", "C"])
    result = await aggregator.fetch_all(["A", "B", "C"], "x")

    assert peak == 3
    assert result == {c: [{"collection": c}] for c in "ABC"}


@pytest.mark.asyncio
async def test_full_mode_scenario_single_record(directus, make_aggregator):
    directus.add("Items", [GROTTO], search="grotto")
    directus.add("Items", [GROTTO])
    aggregator = make_aggregator(["Items"])

    data = await aggregator.get_directus_data("grotto")

    assert data.search_results == {"Items": [GROTTO]}
    assert data.all_data == {"Items": [GROTTO]}
    assert data.metadata.query == "grotto"
    assert data.metadata.collections == ["Items"]
    assert data.metadata.timestamp


@pytest.mark.asyncio
async def test_full_mode_issues_search_and_unfiltered_fetch_per_collection(directus, make_aggregator):
    directus.add("Items", [GROTTO])
    directus.add("Drivers", [])
    aggregator = make_aggregator(["Items", "Drivers"])

    await aggregator.get_directus_data("beach")

    assert len(directus.requests) == 4
    assert sorted(directus.searches(), key=str) == sorted(["beach", "beach", None, None], key=str)


@pytest.mark.asyncio
async def test_full_mode_keeps_empty_search_results_with_context(directus, make_aggregator):
    directus.add("Items", [], search="ski")
    directus.add("Items", [GROTTO])
    aggregator = make_aggregator(["Items"])

    data = await aggregator.get_directus_data("ski")

    assert data.search_results == {"Items": []}
    assert data.all_data == {"Items": [GROTTO]}


@pytest.mark.asyncio
async def test_unfiltered_context_can_be_disabled(directus, make_aggregator):
    directus.add("Items", [GROTTO])
    aggregator = make_aggregator(["Items"], include_unfiltered_context=False)

    data = await aggregator.get_directus_data("grotto")

    assert data.all_data is None
    assert directus.searches() == ["grotto"]


@pytest.mark.asyncio
async def test_compact_mode_prunes_empty_collections(directus, make_aggregator):
    directus.add("Items", [GROTTO], search="grotto")
    directus.add("Drivers", [], search="grotto")
    directus.add("Category", status=503, body=b"")
    aggregator = make_aggregator(["Items", "Drivers", "Category"])

    compact = await aggregator.get_directus_data_compact("grotto")

    assert compact == {"Items": [GROTTO]}
    assert all(search == "grotto" for search in directus.searches())


@pytest.mark.asyncio
async def test_compact_is_key_subset_of_full_search_results(directus, make_aggregator):
    directus.add("Items", [GROTTO], search="grotto")
    directus.add("Drivers", [], search="grotto")
    directus.add("Items", [GROTTO])
    directus.add("Drivers", [{"id": 3}])
    aggregator = make_aggregator(["Items", "Drivers"])

    full = await aggregator.get_directus_data("grotto")
    compact = await aggregator.get_directus_data_compact("grotto")

    assert set(compact) <= set(full.search_results)
    assert all(compact[name] for name in compact)


@pytest.mark.asyncio
async def test_blank_collection_name_propagates():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"data": []}))
    async with httpx.AsyncClient(base_url="http://directus.test", transport=transport) as client:
        aggregator = DataAggregator(DirectusFetcher(client), ["Items", ""])
        with pytest.raises(ValueError):
            await aggregator.get_directus_data("q")


@pytest.mark.asyncio
async def test_no_collections_still_yields_empty_available_data(directus, make_aggregator):
    aggregator = make_aggregator([])

    data = await aggregator.get_directus_data("grotto")

    assert data.search_results == {}
    assert data.all_data == {}
    assert data.prompt_payload() == {"relevantResults": {}, "availableData": {}}
    assert directus.requests == []
