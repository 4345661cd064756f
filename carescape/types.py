from typing import NamedTuple, TypeAlias

ClusterId: TypeAlias = str
MarkerId: TypeAlias = str


class LatLng(NamedTuple):
    """A latitude/longitude coordinate pair."""

    lat: float
    lng: float


def wrap_longitude(lng: float) -> float:
    if -180.0 <= lng <= 180.0:
        return lng
    return ((lng + 180.0) % 360.0) - 180.0


def clamp_latitude(lat: float) -> float:
    return min(max(lat, -90.0), 90.0)


class Offset(NamedTuple):
    """A render offset in degrees. ``x`` shifts longitude, ``y`` latitude."""

    x: float
    y: float

    def scaled(self, factor: float) -> "Offset":
        return Offset(self.x * factor, self.y * factor)

    def apply_to(self, point: LatLng) -> LatLng:
        """Shift ``point``, wrapping across the antimeridian and stopping at the poles."""
        return LatLng(
            clamp_latitude(point.lat + self.y), wrap_longitude(point.lng + self.x)
        )


ZERO_OFFSET = Offset(0.0, 0.0)


class Viewport(NamedTuple):
    """The map's current center and zoom level."""

    latitude: float
    longitude: float
    zoom: float


class CameraCommand(NamedTuple):
    """An animated camera transition for the renderer's fly-to primitive."""

    center: LatLng
    zoom: float
    duration_ms: int
