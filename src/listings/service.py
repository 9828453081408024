# src/listings/service.py
"""
The one entry point the HTTP API and the CLI use to get listings.

Per call, either ask the marketplace (and normalize what comes back) or use
the built-in sample data. Upstream trouble of any kind ends in a fallback to
the sample data; the only thing raised from here is PropertyNotFoundError.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import List, Optional, Sequence, TypedDict

import httpx

from listings.clients.marketplace import check_health, get_listing, search_listings
from listings.config import ApiConfig
from listings.models import Property, SearchParams
from listings.pipeline.filter import filter_properties
from listings.pipeline.normalize import normalize_properties
from listings.sample import SAMPLE_PROPERTIES, find_property

logger = logging.getLogger(__name__)


class PropertyNotFoundError(LookupError):
    """Neither the marketplace nor the sample data has this id."""

    def __init__(self, property_id: str):
        super().__init__(f"Property not found: {property_id}")
        self.property_id = property_id


class ApiStatus(TypedDict):
    available: bool
    message: str


async def search_properties(
    config: ApiConfig,
    params: SearchParams,
    *,
    sample: Sequence[Property] = SAMPLE_PROPERTIES,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Property]:
    """
    Live results when the marketplace returns at least one record, otherwise
    the filtered sample data.
    """
    if config.use_mock_data:
        await asyncio.sleep(config.mock_search_delay)
        return _filtered_sample(sample, params)

    result = await search_listings(config, params, transport=transport)
    if result.ok:
        properties = normalize_properties(result.data)
        if properties:
            return properties
        logger.warning("Marketplace returned no listings, using sample data")
    else:
        logger.warning("Marketplace unavailable (%s), using sample data", result.error)

    return _filtered_sample(sample, params)


async def get_property_details(
    config: ApiConfig,
    property_id: str,
    *,
    sample: Sequence[Property] = SAMPLE_PROPERTIES,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Property:
    if config.use_mock_data:
        await asyncio.sleep(config.mock_detail_delay)
        return _sample_or_raise(property_id, sample)

    result = await get_listing(config, property_id, transport=transport)
    if result.ok:
        payload = result.data
        # detail endpoints may wrap the record as {"data": {...}}
        if isinstance(payload, dict) and payload.get("data"):
            payload = payload["data"]
        found = normalize_properties(payload if isinstance(payload, list) else [payload])
        if found:
            prop = found[0]
            if not prop["id"]:
                prop["id"] = property_id
            return prop
        logger.warning("Marketplace returned no listing for %s, using sample data", property_id)
    else:
        logger.warning("Marketplace unavailable for %s (%s), using sample data", property_id, result.error)

    return _sample_or_raise(property_id, sample)


# Sample records are shared by every call; callers get their own copies.
def _filtered_sample(sample: Sequence[Property], params: SearchParams) -> List[Property]:
    return [copy.deepcopy(p) for p in filter_properties(sample, params)]


def _sample_or_raise(property_id: str, sample: Sequence[Property]) -> Property:
    prop = find_property(property_id, sample)
    if prop is None:
        raise PropertyNotFoundError(property_id)
    return copy.deepcopy(prop)


def is_api_configured(config: ApiConfig) -> bool:
    return not config.use_mock_data


def is_guest_mode(config: ApiConfig) -> bool:
    return config.guest_mode and not config.use_mock_data


async def check_api_status(
    config: ApiConfig,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ApiStatus:
    """Human-readable availability report. Informational only."""
    if config.use_mock_data:
        return {
            "available": False,
            "message": "Using mock data. Set USE_MOCK_DATA=false to use real API",
        }

    if config.guest_mode:
        return {
            "available": True,
            "message": "Guest mode: Accessing public API endpoints without authentication",
        }

    error = await check_health(config, transport=transport)
    if error is None:
        return {"available": True, "message": "API is available"}
    return {"available": False, "message": f"API check failed: {error}"}
