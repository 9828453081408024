# src/listings/pipeline/normalize.py
"""
Convert marketplace JSON (or our own sample data) into canonical Property dicts.

The upstream schema was never confirmed, so each canonical field has a short,
ordered list of plausible source keys and the first truthy value wins. Once
the real schema is known, trim FIELD_ALIASES down to it.
"""
import math
from typing import Any, Dict, List, Optional, Tuple

from listings.models import Location, Property

# canonical field -> source keys, in priority order.
# A dotted key ("location.city") reads one level into a nested object.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "propertyId", "_id"),
    "title": ("title", "name", "propertyTitle"),
    "description": ("description", "details"),
    "price": ("price", "priceAmount"),
    "city": ("city", "location.city"),
    "property_type": ("propertyType", "property_type", "type", "category"),
    "bedrooms": ("bedrooms", "bedroomCount"),
    "bathrooms": ("bathrooms", "bathroomCount"),
    "area": ("area", "size", "squareMeters"),
    "image": ("image", "primaryImage", "thumbnail"),
    "images": ("images",),
    "amenities": ("amenities", "features"),
    "created_at": ("createdAt", "created_at", "created"),
    "updated_at": ("updatedAt", "updated_at", "updated"),
}

PURPOSES = ("sale", "rent")


def _lookup(item: dict, key: str) -> Any:
    if "." not in key:
        return item.get(key)
    outer, inner = key.split(".", 1)
    nested = item.get(outer)
    if isinstance(nested, dict):
        return nested.get(inner)
    return None


def _first(item: dict, field: str) -> Any:
    # Falsy values (0, "", []) are skipped like missing ones, so a later alias
    # or the default wins over them.
    for key in FIELD_ALIASES[field]:
        value = _lookup(item, key)
        if value:
            return value
    return None


def _to_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _to_number(value: Any, default: float = 0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number) if number.is_integer() else number


def _to_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _str_or_none(value: Any) -> Optional[str]:
    return str(value) if value else None


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v]


def _purpose(item: dict) -> str:
    for key in ("purpose", "listingType"):
        value = item.get(key)
        if isinstance(value, str) and value.strip().lower() in PURPOSES:
            return value.strip().lower()
    return "rent" if item.get("forRent") else "sale"


def _location(item: dict) -> Optional[Location]:
    loc = item.get("location")
    if not isinstance(loc, dict):
        return None

    # GeoJSON-style pair: [longitude, latitude]
    coords = loc.get("coordinates")
    if isinstance(coords, (list, tuple)) and coords:
        lat = _to_float(coords[1] if len(coords) > 1 else None)
        lng = _to_float(coords[0])
        if lat is None:
            lat = _to_float(loc.get("lat"))
        if lng is None:
            lng = _to_float(loc.get("lng"))
    else:
        lat = _to_float(loc.get("latitude", loc.get("lat")))
        lng = _to_float(loc.get("longitude", loc.get("lng")))

    if lat is None or lng is None:
        return None
    return {"latitude": lat, "longitude": lng}


def normalize_property(item: dict) -> Property:
    """
    Map one source object onto the canonical record.

    Missing numbers become 0 (bathrooms stays None), missing lists become [].
    """
    images = _str_list(_first(item, "images"))
    image = _str_or_none(_first(item, "image") or (images[0] if images else None))
    if not images and image:
        images = [image]

    return {
        "id": str(_first(item, "id") or ""),
        "title": str(_first(item, "title") or ""),
        "description": str(_first(item, "description") or ""),
        "price": _to_int(_first(item, "price")),
        "purpose": _purpose(item),
        "city": str(_first(item, "city") or ""),
        "property_type": str(_first(item, "property_type") or ""),
        "bedrooms": _to_int(_first(item, "bedrooms")),
        "bathrooms": _to_int(_first(item, "bathrooms"), default=None),
        "area": _to_number(_first(item, "area")),
        "image": image,
        "images": images,
        "location": _location(item),
        "amenities": _str_list(_first(item, "amenities")),
        "created_at": _str_or_none(_first(item, "created_at")),
        "updated_at": _str_or_none(_first(item, "updated_at")),
    }


def normalize_properties(payload: Any) -> List[Property]:
    """
    Accept a JSON array, or an object wrapping one under "data".
    Anything else (including a bare object) yields an empty list.
    """
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []

    out: List[Property] = []
    for item in payload:
        if not isinstance(item, dict):
            continue  # not a record, skip
        out.append(normalize_property(item))
    return out
