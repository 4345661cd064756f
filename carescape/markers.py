import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional

from carescape.constants import COLOR_TYPE_VALUES
from carescape.coordinates import parse_coordinates
from carescape.types import LatLng, MarkerId

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


@dataclass(frozen=True)
class MapMarker:
    """A single plotted point representing one color record."""

    id: MarkerId
    lat: float
    lng: float
    data: Any = field(default=None, compare=False, repr=False)

    @property
    def position(self) -> LatLng:
        return LatLng(self.lat, self.lng)


def record_id(record: Record) -> Optional[MarkerId]:
    """Return the record id as a string, accepting Mongo-style ``_id`` keys."""
    value = record.get("id", record.get("_id"))
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def record_coordinates(record: Record) -> Any:
    """Return the raw coordinate value of a record, whatever shape it is in."""
    for key in ("coordinates", "locationGeom", "location_geom"):
        if record.get(key) is not None:
            return record[key]
    origin = record.get("origin")
    if isinstance(origin, Mapping):
        return origin.get("coordinates")
    return None


def record_location(record: Record) -> Optional[str]:
    location = record.get("location")
    if isinstance(location, str):
        return location
    origin = record.get("origin")
    if isinstance(origin, Mapping) and isinstance(origin.get("name"), str):
        return origin["name"]
    return None


def record_materials(record: Record) -> List[str]:
    """
    Return the material names of a record.

    Materials are stored either as plain strings or as objects such as
    ``{"name": "Madder root", "partUsed": "root"}``. A process source material
    counts as a material too.
    """
    names: List[str] = []
    for material in record.get("materials") or []:
        if isinstance(material, str):
            names.append(material)
        elif isinstance(material, Mapping) and isinstance(material.get("name"), str):
            names.append(material["name"])
    process = record.get("process")
    if isinstance(process, Mapping) and isinstance(process.get("sourceMaterial"), str):
        names.append(process["sourceMaterial"])
    return names


def record_color_type(record: Record) -> Optional[str]:
    value = record.get("type", record.get("colorType"))
    if value is None:
        process = record.get("process")
        if isinstance(process, Mapping):
            value = process.get("type")
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value if value in COLOR_TYPE_VALUES else None


def build_marker(record: Record) -> Optional[MapMarker]:
    marker_id = record_id(record)
    if marker_id is None:
        return None
    point = parse_coordinates(record_coordinates(record))
    if point is None:
        return None
    return MapMarker(id=marker_id, lat=point.lat, lng=point.lng, data=record)


def build_markers(records: Iterable[Record]) -> List[MapMarker]:
    """
    Build one marker per record with resolvable coordinates, in input order.

    Records whose coordinates are missing or malformed are dropped.
    """
    markers: List[MapMarker] = []
    dropped = 0
    for record in records:
        marker = build_marker(record)
        if marker is None:
            dropped += 1
            continue
        markers.append(marker)
    if dropped:
        logger.debug(f"Dropped {dropped} records without usable coordinates")
    return markers
