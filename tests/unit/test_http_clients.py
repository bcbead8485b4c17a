"""
Unit tests for the catalog and listing service HTTP clients.
"""
import httpx
import pytest

from internal.domain.catalog import LocationLevel, SearchFilters
from internal.domain.errors import (
    CatalogUnavailableError,
    ListingServiceError,
    LocationSearchError,
)
from internal.infrastructure.http_clients import CatalogClient, ListingClient


BASE_URL = "http://catalog.test/api/"


def _catalog_client(handler, **kwargs) -> CatalogClient:
    return CatalogClient(base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


class TestCatalogClientTrees:
    """Tests for catalog tree fetches."""

    @pytest.mark.asyncio
    async def test_get_categories_unwraps_envelope(self, categories_payload):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"success": True, "data": categories_payload})

        client = _catalog_client(handler)
        categories = await client.get_categories()
        await client.close()

        assert [c.name for c in categories] == ["Mobile", "Electronics", "Vehicles"]
        assert requests[0].url.path == "/api/categories"
        assert requests[0].url.params["includeSubcategories"] == "true"

    @pytest.mark.asyncio
    async def test_single_root_hierarchy_wrapped(self, locations_payload):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/locations/hierarchy"
            return httpx.Response(200, json={"data": locations_payload[0]})

        client = _catalog_client(handler)
        locations = await client.get_location_hierarchy()
        await client.close()

        assert len(locations) == 1
        assert locations[0].level == LocationLevel.PROVINCE
        assert locations[0].children[0].name == "Kathmandu"

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = _catalog_client(lambda request: httpx.Response(500))

        with pytest.raises(CatalogUnavailableError) as exc_info:
            await client.get_categories_raw()
        await client.close()

        assert exc_info.value.resource == "categories"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _catalog_client(handler)

        with pytest.raises(CatalogUnavailableError):
            await client.get_location_hierarchy_raw()
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client = _catalog_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(CatalogUnavailableError):
            await client.get_categories_raw()
        await client.close()

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        client = _catalog_client(lambda request: httpx.Response(200, json={"data": "nope"}))

        with pytest.raises(CatalogUnavailableError):
            await client.get_categories_raw()
        await client.close()


class TestCatalogClientSearch:
    """Tests for the fuzzy location search."""

    @pytest.mark.asyncio
    async def test_search_locations(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": [
                {"id": 5000, "name": "Dilli Bazaar", "slug": "dilli-bazaar", "type": "area", "parent_id": 100},
                {"id": 5001, "name": "Dilli Bazaar Chowk", "slug": "dilli-bazaar-chowk", "type": "area"},
            ]})

        client = _catalog_client(handler)
        results = await client.search_locations("Dilli Bazaar", limit=5)
        await client.close()

        assert [r.id for r in results] == [5000, 5001]
        assert results[0].parent_id == 100
        assert requests[0].url.path == "/api/locations/search"
        assert requests[0].url.params["q"] == "Dilli Bazaar"
        assert requests[0].url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_results_capped_at_limit(self):
        payload = [{"id": i, "name": f"Area {i}", "type": "area"} for i in range(10)]
        client = _catalog_client(lambda request: httpx.Response(200, json=payload))

        results = await client.search_locations("Area", limit=3)
        await client.close()

        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_http_error_becomes_search_error(self):
        client = _catalog_client(lambda request: httpx.Response(503))

        with pytest.raises(LocationSearchError) as exc_info:
            await client.search_locations("Dilli Bazaar")
        await client.close()

        assert exc_info.value.query == "Dilli Bazaar"

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        client = _catalog_client(lambda request: httpx.Response(200, json=[{"name": "No ID"}]))

        with pytest.raises(LocationSearchError):
            await client.search_locations("Dilli Bazaar")
        await client.close()

    @pytest.mark.asyncio
    async def test_circuit_opens_after_failures(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        client = _catalog_client(handler, failure_threshold=2, recovery_timeout=60)

        for _ in range(2):
            with pytest.raises(LocationSearchError):
                await client.search_locations("Dilli Bazaar")
        assert client.circuit_breaker.opened

        with pytest.raises(LocationSearchError):
            await client.search_locations("Dilli Bazaar")
        await client.close()

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_tree_fetches_bypass_circuit(self, categories_payload):
        responses = iter([httpx.Response(503), httpx.Response(503)])

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("locations/search"):
                return next(responses)
            return httpx.Response(200, json=categories_payload)

        client = _catalog_client(handler, failure_threshold=2)
        for _ in range(2):
            with pytest.raises(LocationSearchError):
                await client.search_locations("Dilli Bazaar")

        categories = await client.get_categories_raw()
        await client.close()

        assert len(categories) == 3


class TestListingClient:
    """Tests for the listing service client."""

    @pytest.mark.asyncio
    async def test_search_ads_sends_filters(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": [{"id": 1}], "pagination": {"total": 1}})

        client = ListingClient(base_url="http://listing.test/api/", transport=httpx.MockTransport(handler))
        body = await client.search_ads(
            SearchFilters(parent_category_id=1, location_name="Kathmandu", min_price="1000")
        )
        await client.close()

        assert body["data"] == [{"id": 1}]
        params = requests[0].url.params
        assert requests[0].url.path == "/api/ads"
        assert params["parentCategoryId"] == "1"
        assert params["location_name"] == "Kathmandu"
        assert params["minPrice"] == "1000"
        assert params["limit"] == "20"
        assert params["offset"] == "0"
        assert "category" not in params

    @pytest.mark.asyncio
    async def test_status_error(self):
        client = ListingClient(
            base_url="http://listing.test/api/",
            transport=httpx.MockTransport(lambda request: httpx.Response(502)),
        )

        with pytest.raises(ListingServiceError) as exc_info:
            await client.search_ads(SearchFilters())
        await client.close()

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        client = ListingClient(
            base_url="http://listing.test/api/",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2])),
        )

        with pytest.raises(ListingServiceError):
            await client.search_ads(SearchFilters())
        await client.close()
