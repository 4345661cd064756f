import logging
from collections.abc import Iterable
from typing import List, Optional

import dataframely as dy

from carescape import defaults
from carescape.cluster import Cluster, cluster_markers, threshold_for_zoom
from carescape.dataframes.color_record import ColorRecordSchema, ordered_ids
from carescape.filter import NO_FILTER, ColorFilter, filter_records
from carescape.markers import MapMarker, Record, build_markers, record_id
from carescape.story import StoryNavigator
from carescape.types import MarkerId, Viewport
from carescape.zoom import scale_clusters

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = Viewport(
    latitude=defaults.DEFAULT_LATITUDE,
    longitude=defaults.DEFAULT_LONGITUDE,
    zoom=defaults.DEFAULT_ZOOM,
)


class MapView:
    """Keeps the map's markers and clusters in step with its inputs.

    Each setter is a recomputation trigger and only redoes the stages that
    depend on what changed:

    - ``set_records``: catalogue, filter, markers, clusters
    - ``set_filter``: filter, markers, clusters
    - ``set_viewport``: clusters (only when the zoom threshold step changes)
      and scaling

    The story navigator is handed the new marker list whenever markers are
    rebuilt.
    """

    def __init__(
        self,
        navigator: StoryNavigator,
        viewport: Viewport = DEFAULT_VIEWPORT,
        threshold_degrees: Optional[float] = None,
    ) -> None:
        self.navigator = navigator
        self.viewport = viewport
        # A fixed threshold overrides the zoom policy
        self.fixed_threshold = threshold_degrees
        self.color_filter: ColorFilter = NO_FILTER
        self._records: dict[MarkerId, Record] = {}
        self._catalogue: dy.DataFrame[ColorRecordSchema] = ColorRecordSchema.build([])
        self._markers: List[MapMarker] = []
        self._threshold: Optional[float] = None
        self._base_clusters: List[Cluster] = []
        self._clusters: List[Cluster] = []

    @property
    def markers(self) -> List[MapMarker]:
        return list(self._markers)

    @property
    def clusters(self) -> List[Cluster]:
        return list(self._clusters)

    @property
    def threshold(self) -> float:
        if self.fixed_threshold is not None:
            return self.fixed_threshold
        return threshold_for_zoom(self.viewport.zoom)

    def set_records(self, records: Iterable[Record]) -> None:
        records = list(records)
        self._records = {}
        for record in records:
            marker_id = record_id(record)
            if marker_id is not None and marker_id not in self._records:
                self._records[marker_id] = record
        self._catalogue = ColorRecordSchema.build(records)
        logger.debug(f"Loaded {self._catalogue.height} color records")
        self._rebuild_markers()

    def set_filter(self, color_filter: ColorFilter) -> None:
        self.color_filter = color_filter
        self._rebuild_markers()

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport
        if self.threshold != self._threshold:
            self._recluster()
        else:
            self._rescale()

    def set_zoom(self, zoom: float) -> None:
        self.set_viewport(self.viewport._replace(zoom=zoom))

    def cluster_for(self, marker_id: MarkerId) -> Optional[Cluster]:
        for cluster in self._clusters:
            if any(member.id == marker_id for member in cluster.members):
                return cluster
        return None

    def _rebuild_markers(self) -> None:
        filtered = filter_records(self._catalogue, self.color_filter)
        self._markers = build_markers(
            self._records[marker_id] for marker_id in ordered_ids(filtered)
        )
        self.navigator.update_markers(self._markers)
        self._recluster()

    def _recluster(self) -> None:
        self._threshold = self.threshold
        self._base_clusters = cluster_markers(self._markers, self._threshold)
        self._rescale()

    def _rescale(self) -> None:
        self._clusters = scale_clusters(self._base_clusters, self.viewport.zoom)
