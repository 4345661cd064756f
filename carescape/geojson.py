from collections.abc import Mapping
from typing import Sequence

import geojson
import shapely

from carescape import output
from carescape.cluster import Cluster
from carescape.markers import MapMarker
from carescape.types import LatLng, Offset

DEFAULT_MARKER_COLOR = "#2C3E50"


def _marker_color(marker: MapMarker) -> str:
    record = marker.data
    if isinstance(record, Mapping):
        color = record.get("hex", record.get("hexCode"))
        if isinstance(color, str) and color:
            return color
    return DEFAULT_MARKER_COLOR


def build_geojson_feature(
    marker: MapMarker,
    cluster: Cluster,
    offset: Offset,
    rendered: LatLng,
) -> geojson.Feature:
    """
    Build a point feature drawn at the marker's rendered (offset) position.

    The marker's true position is kept in the properties so a renderer can
    draw a leader line back to it.
    """
    name = marker.data.get("name") if isinstance(marker.data, Mapping) else None
    return geojson.Feature(
        id=marker.id,
        properties={
            "id": marker.id,
            "name": name,
            "fill": _marker_color(marker),
            "stroke": "#ffffff",
            "stroke-width": 2,
            "marker-size": cluster.marker_size,
            "cluster": cluster.id,
            "cluster_size": cluster.cluster_size,
            "is_clustered": cluster.is_clustered,
            "offset_x": offset.x,
            "offset_y": offset.y,
            "lat": marker.lat,
            "lng": marker.lng,
        },
        geometry=shapely.geometry.mapping(shapely.Point(rendered.lng, rendered.lat)),  # type: ignore
    )


def build_geojson_feature_collection(
    clusters: Sequence[Cluster],
) -> geojson.FeatureCollection:
    features: list[geojson.Feature] = []

    for cluster in clusters:
        for member, offset, rendered in zip(
            cluster.members, cluster.offsets, cluster.rendered_positions()
        ):
            features.append(build_geojson_feature(member, cluster, offset, rendered))

    return geojson.FeatureCollection(features)


def write_geojson(
    feature_collection: geojson.FeatureCollection, output_file: str
) -> None:
    """Write the rendered marker features for the map front end."""
    with open(output.prepare_file_path(output_file), "w") as markers_file:
        geojson.dump(feature_collection, markers_file)
