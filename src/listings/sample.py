# src/listings/sample.py
"""
Built-in sample listings, used whenever the live marketplace is off or down.

The records ship as package data and go through the same normalizer as
upstream responses, so callers always see one shape.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Optional, Tuple

from listings.models import Property
from listings.pipeline.normalize import normalize_properties

SAMPLE_PATH = Path(__file__).resolve().parent / "data" / "sample_properties.json"


def load_sample_properties(path: Path = SAMPLE_PATH) -> Tuple[Property, ...]:
    with path.open(encoding="utf-8") as f:
        return tuple(normalize_properties(json.load(f)))


# loaded once at import; treat as read-only
SAMPLE_PROPERTIES: Tuple[Property, ...] = load_sample_properties()


def find_property(property_id: str, properties: Iterable[Property] = SAMPLE_PROPERTIES) -> Optional[Property]:
    return next((p for p in properties if p["id"] == property_id), None)
