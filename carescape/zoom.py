import dataclasses
import math
from typing import List, Sequence

import numpy as np

from carescape import defaults
from carescape.cluster import Cluster


def zoom_factor(
    zoom: float,
    min_scale: float = defaults.MIN_SCALE,
    max_scale: float = defaults.MAX_SCALE,
) -> float:
    """
    Visual scale factor for a zoom level.

    Rises linearly from ``min_scale`` at ``SCALE_MIN_ZOOM`` to ``max_scale`` at
    ``SCALE_MAX_ZOOM`` and stays clamped outside that range, so markers remain
    legible at any zoom.
    """
    if math.isnan(zoom):
        raise ValueError("Zoom must be a number")
    return float(
        np.interp(
            zoom,
            [defaults.SCALE_MIN_ZOOM, defaults.SCALE_MAX_ZOOM],
            [min_scale, max_scale],
        )
    )


def scale_clusters(clusters: Sequence[Cluster], zoom: float) -> List[Cluster]:
    """
    Return copies of ``clusters`` sized for ``zoom``.

    Marker size and offset magnitude are both multiplied by the zoom factor.
    The factor always applies to the unscaled base values, so scaling an
    already scaled cluster does not compound.
    """
    factor = zoom_factor(zoom)
    return [
        dataclasses.replace(
            cluster,
            scale=factor,
            marker_size=defaults.BASE_MARKER_SIZE_PX * factor,
        )
        for cluster in clusters
    ]
