"""
Where the CLI puts what it renders.

The marker GeoJSON, the cluster summary JSON and the run log all land in
``OUTPUT_DIR`` so a map front end can pick them up from one place. Tests
point ``OUTPUT_DIR`` elsewhere before writing.
"""

import json
import os
from typing import Sequence

from carescape.cluster import Cluster

OUTPUT_DIR = "output"

GEOJSON_FILENAME = "markers.geojson"
JSON_FILENAME = "clusters.json"


def ensure_output_dir() -> None:
    os.makedirs(OUTPUT_DIR, exist_ok=True)


def get_output_path(filename: str) -> str:
    """Path of ``filename`` inside the render output directory."""
    ensure_output_dir()
    return os.path.join(OUTPUT_DIR, filename)


def normalize_path(path: str) -> str:
    """
    Resolve the ``--log-file`` value: a bare file name is written next to the
    rendered markers, anything with a directory is used as given.
    """
    if not path.startswith(f"{OUTPUT_DIR}/") and not os.path.dirname(path):
        return os.path.join(OUTPUT_DIR, path)
    return path


def get_geojson_path() -> str:
    return get_output_path(GEOJSON_FILENAME)


def get_json_path() -> str:
    return get_output_path(JSON_FILENAME)


def prepare_file_path(path: str) -> str:
    """Create the parent directory of a marker or cluster file and return ``path``."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return path


def cluster_to_dict(cluster: Cluster) -> dict:
    return {
        "id": cluster.id,
        "centroid": {"lat": cluster.centroid.lat, "lng": cluster.centroid.lng},
        "cluster_size": cluster.cluster_size,
        "is_clustered": cluster.is_clustered,
        "marker_size": cluster.marker_size,
        "members": [
            {
                "id": member.id,
                "lat": member.lat,
                "lng": member.lng,
                "offset": {"x": offset.x, "y": offset.y},
            }
            for member, offset in zip(cluster.members, cluster.offsets)
        ],
    }


def write_json_output(clusters: Sequence[Cluster], output_path: str) -> None:
    """
    Write one entry per cluster with its centroid, marker size and the scaled
    offset of every member, in the order the clusters were built.
    """
    with open(prepare_file_path(output_path), "w") as json_writer:
        json.dump(
            [cluster_to_dict(cluster) for cluster in clusters], json_writer, indent=2
        )
