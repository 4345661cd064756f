"""Normalization of the coordinate shapes found in color records.

Records coming from the catalogue store their location in several ways:

- a mapping with ``lat``/``lng`` keys, e.g. ``{"lat": 40.1, "lng": -74.5}``
- the same mapping JSON-encoded as a string
- a GeoJSON point, e.g. ``{"type": "Point", "coordinates": [-74.5, 40.1]}``
- a ``[lat, lng]`` pair

``parse_coordinates`` turns any of them into a ``LatLng`` or returns ``None``.
It never raises, so callers can treat a ``None`` as "do not plot".
"""

import json
import math
from collections.abc import Mapping
from typing import Any, Optional

from carescape.constants import LAT_MAX, LAT_MIN, LNG_MAX, LNG_MIN
from carescape.types import LatLng


def _to_float(value: Any) -> Optional[float]:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_valid_lat_lng(lat: float, lng: float) -> bool:
    return LAT_MIN <= lat <= LAT_MAX and LNG_MIN <= lng <= LNG_MAX


def _from_values(raw_lat: Any, raw_lng: Any) -> Optional[LatLng]:
    lat = _to_float(raw_lat)
    lng = _to_float(raw_lng)
    if lat is None or lng is None or not is_valid_lat_lng(lat, lng):
        return None
    return LatLng(lat, lng)


def _from_mapping(raw: Mapping) -> Optional[LatLng]:
    if "lat" in raw and "lng" in raw:
        return _from_values(raw["lat"], raw["lng"])

    # GeoJSON positions are [longitude, latitude]
    if raw.get("type") == "Point":
        position = raw.get("coordinates")
        if isinstance(position, (list, tuple)) and len(position) >= 2:
            return _from_values(position[1], position[0])

    return None


def parse_coordinates(raw: Any) -> Optional[LatLng]:
    """
    Parse a raw coordinate value into a validated ``LatLng``.

    Args:
        raw: A mapping, a JSON string, a GeoJSON point, a ``[lat, lng]`` pair or None

    Returns:
        The parsed point, or None when the value is missing, malformed or out of range
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            return None
        # Only structured values are accepted from a string, never another string
        if isinstance(decoded, (Mapping, list)):
            return parse_coordinates(decoded)
        return None

    if isinstance(raw, Mapping):
        return _from_mapping(raw)

    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return _from_values(raw[0], raw[1])

    return None
