"""
Tests for the search / detail service and its sample-data fallback
"""
import httpx
import pytest

from listings.config import ApiConfig
from listings.sample import SAMPLE_PROPERTIES
from listings.service import (
    PropertyNotFoundError,
    check_api_status,
    get_property_details,
    is_api_configured,
    is_guest_mode,
    search_properties,
)

from conftest import BASE_URL, FakeUpstream

RIYADH_SALE = {"city": "الرياض", "purpose": "sale"}


class TestSearchProperties:

    @pytest.mark.asyncio
    async def test_mock_mode_never_calls_upstream(self, mock_config, upstream):
        result = await search_properties(mock_config, RIYADH_SALE, transport=upstream.transport)

        assert len(result) == 17
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_live_results_are_normalized(self, live_config, upstream_record):
        upstream = FakeUpstream({"/properties/search": {"success": True, "data": [upstream_record]}})

        result = await search_properties(live_config, RIYADH_SALE, transport=upstream.transport)

        assert [p["id"] for p in result] == ["9001"]
        assert result[0]["title"] == "Penthouse on King Fahd Road"

    @pytest.mark.asyncio
    async def test_falls_back_when_every_candidate_fails(self, live_config):
        upstream = FakeUpstream({"/listings/search": httpx.ConnectError("down")})

        result = await search_properties(live_config, RIYADH_SALE, transport=upstream.transport)

        assert [p["id"] for p in result][:3] == ["1", "2", "3"]
        assert len(result) == 17
        assert len(upstream.requests) == 10

    @pytest.mark.asyncio
    async def test_falls_back_on_empty_upstream_result(self, live_config):
        upstream = FakeUpstream({"/properties/search": {"data": []}})

        result = await search_properties(live_config, {"bedrooms": "5+"}, transport=upstream.transport)

        assert len(result) == 23

    @pytest.mark.asyncio
    async def test_falls_back_on_authentication_required(self, live_config):
        upstream = FakeUpstream({"/properties/search": httpx.Response(403)})

        result = await search_properties(live_config, {"purpose": "rent"}, transport=upstream.transport)

        assert len(result) == 31
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_uses_injected_sample(self, live_config, upstream):
        sample = [SAMPLE_PROPERTIES[0]]
        result = await search_properties(live_config, {}, sample=sample, transport=upstream.transport)
        assert result == sample

    @pytest.mark.asyncio
    async def test_malformed_base_url_falls_back(self):
        config = ApiConfig(base_url="http://[::1/api")

        result = await search_properties(config, {"city": "جدة", "property_type": "فيلا"})

        assert [p["id"] for p in result] == ["24", "25", "26", "27", "28"]

    @pytest.mark.asyncio
    async def test_mutating_results_does_not_touch_sample(self, mock_config):
        params = {"city": "جدة"}
        first = await search_properties(mock_config, params)
        expected = [p["id"] for p in first]

        first[0]["city"] = "CHANGED"
        first[0]["images"].append("https://img.example.test/extra.jpg")

        again = await search_properties(mock_config, params)
        assert [p["id"] for p in again] == expected
        assert again[0]["city"] == "جدة"
        assert again[0]["images"] == [again[0]["image"]]

    @pytest.mark.asyncio
    async def test_identical_calls_give_identical_results(self, mock_config):
        params = {"city": "جدة", "max_price": "1000000"}
        assert await search_properties(mock_config, params) == await search_properties(mock_config, params)


class TestGetPropertyDetails:

    @pytest.mark.asyncio
    async def test_mock_mode(self, mock_config, upstream):
        prop = await get_property_details(mock_config, "24", transport=upstream.transport)

        assert prop["id"] == "24"
        assert prop["city"] == "جدة"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_mock_mode_not_found(self, mock_config):
        with pytest.raises(PropertyNotFoundError) as exc_info:
            await get_property_details(mock_config, "999")
        assert exc_info.value.property_id == "999"

    @pytest.mark.asyncio
    async def test_live_record(self, live_config, upstream_record):
        upstream = FakeUpstream({"/marketplace/9001": upstream_record})

        prop = await get_property_details(live_config, "9001", transport=upstream.transport)

        assert prop["id"] == "9001"
        assert prop["bedrooms"] == 4

    @pytest.mark.asyncio
    async def test_live_record_wrapped_in_data(self, live_config):
        upstream = FakeUpstream({"/properties/77": {"success": True, "data": {"title": "Wrapped"}}})

        prop = await get_property_details(live_config, "77", transport=upstream.transport)

        assert prop["title"] == "Wrapped"
        assert prop["id"] == "77"

    @pytest.mark.asyncio
    async def test_malformed_base_url_falls_back(self):
        config = ApiConfig(base_url="http://[::1/api")

        prop = await get_property_details(config, "24")

        assert prop["id"] == "24"

    @pytest.mark.asyncio
    async def test_mutating_detail_does_not_touch_sample(self, mock_config):
        prop = await get_property_details(mock_config, "3")
        prop["price"] = 1

        assert (await get_property_details(mock_config, "3"))["price"] == 950000

    @pytest.mark.asyncio
    async def test_falls_back_to_sample(self, live_config, upstream):
        prop = await get_property_details(live_config, "5", transport=upstream.transport)

        assert prop["id"] == "5"
        assert len(upstream.requests) == 10

    @pytest.mark.asyncio
    async def test_not_found_anywhere(self, live_config, upstream):
        with pytest.raises(PropertyNotFoundError):
            await get_property_details(live_config, "nope", transport=upstream.transport)


class TestStatus:

    def test_flags_mock(self, mock_config):
        assert is_api_configured(mock_config) is False
        assert is_guest_mode(mock_config) is False

    def test_flags_guest(self, live_config):
        assert is_api_configured(live_config) is True
        assert is_guest_mode(live_config) is True

    def test_flags_with_credentials(self):
        config = ApiConfig(base_url=BASE_URL, api_token="t")
        assert is_api_configured(config) is True
        assert is_guest_mode(config) is False

    @pytest.mark.asyncio
    async def test_status_mock(self, mock_config):
        status = await check_api_status(mock_config)
        assert status["available"] is False
        assert status["message"].startswith("Using mock data")

    @pytest.mark.asyncio
    async def test_status_guest_does_not_probe(self, live_config, upstream):
        status = await check_api_status(live_config, transport=upstream.transport)
        assert status["available"] is True
        assert status["message"].startswith("Guest mode")
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_status_probe_ok(self):
        config = ApiConfig(base_url=BASE_URL, api_key="k")
        upstream = FakeUpstream({"/api/v1/health": {"ok": True}})

        status = await check_api_status(config, transport=upstream.transport)

        assert status == {"available": True, "message": "API is available"}
        assert upstream.requests[0].headers["X-API-Key"] == "k"

    @pytest.mark.asyncio
    async def test_status_probe_failed(self, upstream):
        config = ApiConfig(base_url=BASE_URL, api_key="k")

        status = await check_api_status(config, transport=upstream.transport)

        assert status["available"] is False
        assert status["message"].startswith("API check failed:")
