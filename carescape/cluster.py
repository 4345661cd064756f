"""Zoom-adaptive clustering of map markers.

Markers that sit too close together to be told apart at the current zoom are
grouped with a single greedy pass: each marker not yet claimed by a cluster
seeds a new cluster and claims every unclaimed marker within the threshold
distance. Distances are planar, measured in raw latitude/longitude degrees,
because the threshold itself is a zoom-relative heuristic rather than a
physical distance.

Members of a multi-marker cluster are spread evenly around a small circle
centered on the cluster centroid so each one stays clickable. The circle's
radius depends only on the cluster size; how far it is drawn on screen is
decided later by ``carescape.zoom``.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from carescape import defaults
from carescape.markers import MapMarker
from carescape.types import ZERO_OFFSET, ClusterId, LatLng, MarkerId, Offset

logger = logging.getLogger(__name__)

# Offset radius (degrees) for small clusters, keyed by cluster size
CLUSTER_RADIUS_BY_SIZE: dict[int, float] = {
    2: 0.08,
    3: 0.08,
    4: 0.10,
    5: 0.12,
}
MAX_FIXED_RADIUS = 0.12
# Minimum arc length between neighbouring members of a large cluster
MIN_MEMBER_SPACING = 0.025


@dataclass(frozen=True)
class Cluster:
    """One or more markers rendered together around a shared centroid.

    ``base_offsets`` holds one unscaled offset per member, in member order.
    ``scale`` and ``marker_size`` are set by the zoom scaler.
    """

    id: ClusterId
    members: tuple[MapMarker, ...]
    centroid: LatLng
    base_offsets: tuple[Offset, ...]
    scale: float = 1.0
    marker_size: float = defaults.BASE_MARKER_SIZE_PX

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("A cluster needs at least one member")
        if len(self.base_offsets) != len(self.members):
            raise ValueError(
                f"Cluster {self.id} has {len(self.members)} members "
                f"but {len(self.base_offsets)} offsets"
            )

    @property
    def cluster_size(self) -> int:
        return len(self.members)

    @property
    def is_clustered(self) -> bool:
        return self.cluster_size > 1

    @property
    def offsets(self) -> tuple[Offset, ...]:
        return tuple(offset.scaled(self.scale) for offset in self.base_offsets)

    def member_ids(self) -> List[MarkerId]:
        return [member.id for member in self.members]

    def offset_for(self, marker_id: MarkerId) -> Optional[Offset]:
        for member, offset in zip(self.members, self.offsets):
            if member.id == marker_id:
                return offset
        return None

    def rendered_positions(self) -> List[LatLng]:
        """Where each member is drawn: the centroid shifted by its scaled offset."""
        return [offset.apply_to(self.centroid) for offset in self.offsets]


def cluster_radius(cluster_size: int) -> float:
    if cluster_size in CLUSTER_RADIUS_BY_SIZE:
        return CLUSTER_RADIUS_BY_SIZE[cluster_size]
    # Grow the circle so large clusters keep their members apart
    return max(MAX_FIXED_RADIUS, cluster_size * MIN_MEMBER_SPACING / (2 * math.pi))


def cluster_offset(index: int, cluster_size: int) -> Offset:
    """
    Offset of member ``index`` in a cluster of ``cluster_size`` markers.

    Members are spread at equal angles around a circle, starting due east,
    so no two members of the same cluster share an offset.
    """
    if cluster_size <= 1:
        return ZERO_OFFSET
    radius = cluster_radius(cluster_size)
    angle = 2 * math.pi * index / cluster_size
    return Offset(radius * math.cos(angle), radius * math.sin(angle))


def threshold_for_zoom(zoom: float) -> float:
    """
    Clustering threshold in degrees for a zoom level.

    Wide when zoomed out, near zero when zoomed in. The value only changes
    when the zoom crosses one of the configured steps.
    """
    if math.isnan(zoom):
        raise ValueError("Zoom must be a number")
    for min_zoom, threshold in defaults.ZOOM_THRESHOLD_STEPS:
        if zoom >= min_zoom:
            return threshold
    return defaults.MAX_THRESHOLD_DEGREES


def _build_cluster(members: Sequence[MapMarker]) -> Cluster:
    lats = np.fromiter((member.lat for member in members), dtype=np.float64)
    lngs = np.fromiter((member.lng for member in members), dtype=np.float64)
    size = len(members)
    return Cluster(
        id=f"cluster-{members[0].id}",
        members=tuple(members),
        centroid=LatLng(float(lats.mean()), float(lngs.mean())),
        base_offsets=tuple(cluster_offset(index, size) for index in range(size)),
    )


def cluster_markers(
    markers: Sequence[MapMarker],
    threshold_degrees: float = defaults.DEFAULT_THRESHOLD_DEGREES,
) -> List[Cluster]:
    """
    Group markers closer than ``threshold_degrees`` into clusters.

    Every input marker ends up in exactly one cluster. Iteration follows
    input order, so the same input and threshold always give the same
    clusters. A threshold of zero disables grouping.

    Args:
        markers: Markers to cluster, in display order
        threshold_degrees: Maximum planar distance from a cluster's seed marker

    Returns:
        Clusters ordered by their seed marker's position in the input
    """
    if math.isnan(threshold_degrees) or threshold_degrees < 0:
        raise ValueError(f"Invalid clustering threshold: {threshold_degrees}")

    if not markers:
        return []

    if threshold_degrees == 0:
        return [_build_cluster([marker]) for marker in markers]

    coordinates = np.array(
        [(marker.lat, marker.lng) for marker in markers], dtype=np.float64
    )
    consumed = np.zeros(len(markers), dtype=bool)
    clusters: List[Cluster] = []

    for seed_index in range(len(markers)):
        if consumed[seed_index]:
            continue
        distances = np.hypot(
            coordinates[:, 0] - coordinates[seed_index, 0],
            coordinates[:, 1] - coordinates[seed_index, 1],
        )
        member_mask = ~consumed & (distances <= threshold_degrees)
        member_mask[seed_index] = True
        member_indices = np.flatnonzero(member_mask)
        consumed[member_indices] = True
        clusters.append(_build_cluster([markers[i] for i in member_indices]))

    logger.debug(
        f"Clustered {len(markers)} markers into {len(clusters)} clusters "
        f"(threshold {threshold_degrees})"
    )
    return clusters
