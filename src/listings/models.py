# src/listings/models.py
"""
Lightweight typed dictionaries for property listings and search parameters.

Everything is a plain dict with type hints. Records from every source
(sample data or a live upstream response) are coerced into `Property`
by `listings.pipeline.normalize` before anything else looks at them.
"""

from typing import List, Literal, Optional, TypedDict

Purpose = Literal["sale", "rent"]

# Sentinel accepted by the bedrooms filter, meaning "5 or more".
BEDROOMS_FIVE_PLUS = "5+"


class Location(TypedDict):
    latitude: float
    longitude: float


class Property(TypedDict):
    """
    Canonical property record.

    Notes:
    - `id` is opaque and only unique within the dataset it came from.
    - `price` is an integer in whatever currency the source uses.
    - `bathrooms`, `image`, `location` and the timestamps may be None.
    """

    id: str
    title: str
    description: str
    price: int
    purpose: Purpose
    city: str
    property_type: str
    bedrooms: int
    bathrooms: Optional[int]
    area: float
    image: Optional[str]
    images: List[str]
    location: Optional[Location]
    amenities: List[str]
    created_at: Optional[str]
    updated_at: Optional[str]


class SearchParams(TypedDict, total=False):
    """
    Flat set of optional filters. A missing or empty value means "no constraint".

    Prices and bedrooms stay strings because that is how they arrive from
    query strings and form fields; the filter parses them.
    """

    query: str
    city: str
    property_type: str
    purpose: str
    bedrooms: str  # "3" or "5+"
    min_price: str
    max_price: str
    page: int  # accepted, not applied
    limit: int  # accepted, not applied


# Python key -> camelCase name used in query strings (ours and upstream's).
WIRE_PARAM_NAMES = {
    "query": "query",
    "city": "city",
    "property_type": "propertyType",
    "purpose": "purpose",
    "bedrooms": "bedrooms",
    "min_price": "minPrice",
    "max_price": "maxPrice",
    "page": "page",
    "limit": "limit",
}


def to_wire_params(params: SearchParams) -> dict[str, str]:
    """Drop empty values and rename keys to their camelCase wire names."""
    out: dict[str, str] = {}
    for key, wire in WIRE_PARAM_NAMES.items():
        value = params.get(key)
        if value is None or value == "":
            continue
        out[wire] = str(value)
    return out


def from_wire_params(raw: dict[str, str]) -> SearchParams:
    """Inverse of `to_wire_params`; unknown keys are ignored."""
    params: SearchParams = {}
    for key, wire in WIRE_PARAM_NAMES.items():
        value = raw.get(wire)
        if value is None or value == "":
            continue
        if key in ("page", "limit"):
            try:
                params[key] = int(value)
            except ValueError:
                continue
        else:
            params[key] = value
    return params
