import logging
from typing import Sequence

import dataframely as dy

from carescape.dataframes.marker_cluster import MarkerClusterSchema, cluster_sizes
from carescape.types import CameraCommand, MarkerId

logger = logging.getLogger(__name__)


def print_results(
    marker_cluster_dataframe: dy.DataFrame[MarkerClusterSchema],
    zoom: float,
    threshold: float,
) -> None:
    sizes = cluster_sizes(marker_cluster_dataframe)
    grouped = sizes.filter(sizes["cluster_size"] > 1)

    print("-" * 10)
    print(f"zoom {zoom:g} (threshold: {threshold:g} degrees)")
    print(f"markers: {marker_cluster_dataframe.height}")
    print(f"clusters: {sizes.height} ({grouped.height} with more than one marker)")

    for cluster_id, cluster_size, centroid_lat, centroid_lng in grouped.iter_rows():
        print(
            f"  - {cluster_id}: {cluster_size} markers around "
            f"({centroid_lat:.5f}, {centroid_lng:.5f})"
        )


def print_story(steps: Sequence[tuple[MarkerId, CameraCommand]]) -> None:
    print("-" * 10)
    if not steps:
        print("story: no records to visit")
        return

    print(f"story: {len(steps)} records")
    for index, (marker_id, command) in enumerate(steps, start=1):
        print(
            f"  {index}. {marker_id} -> fly to ({command.center.lat:.5f}, "
            f"{command.center.lng:.5f}) zoom {command.zoom:g} "
            f"over {command.duration_ms} ms"
        )
