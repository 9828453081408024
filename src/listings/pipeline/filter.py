# src/listings/pipeline/filter.py
import re
from typing import Iterable, List, Optional

from listings.models import BEDROOMS_FIVE_PLUS, Property, SearchParams

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: str) -> Optional[int]:
    """
    Leading integer of a string ("3" -> 3, "1500000 SAR" -> 1500000), else None.
    """
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def filter_properties(properties: Iterable[Property], params: SearchParams) -> List[Property]:
    """
    Keep the properties that satisfy every filter present in params, in their
    original order. Textual matches are case-insensitive, everything is ANDed.

    An unparseable bedrooms/price value matches nothing, so it empties the
    result instead of being ignored. page/limit are not applied.
    """
    query = (params.get("query") or "").lower()
    city = params.get("city")
    property_type = params.get("property_type")
    purpose = params.get("purpose")
    bedrooms = params.get("bedrooms")
    min_price = params.get("min_price")
    max_price = params.get("max_price")

    beds = parse_int(bedrooms) if bedrooms else None
    lo = parse_int(min_price) if min_price else None
    hi = parse_int(max_price) if max_price else None

    out: List[Property] = []
    for p in properties:
        if query and not (
            query in p["title"].lower()
            or query in p["description"].lower()
            or query in p["city"].lower()
        ):
            continue
        if city and p["city"] != city:
            continue
        if property_type and p["property_type"] != property_type:
            continue
        if bedrooms:
            if bedrooms == BEDROOMS_FIVE_PLUS:
                if p["bedrooms"] < 5:
                    continue
            elif beds is None or p["bedrooms"] != beds:
                continue
        if purpose and p["purpose"] != purpose:
            continue
        if min_price and (lo is None or p["price"] < lo):
            continue
        if max_price and (hi is None or p["price"] > hi):
            continue
        out.append(p)
    return out
