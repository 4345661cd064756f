from typing import Sequence

import dataframely as dy
import polars as pl

from carescape.cluster import Cluster


class MarkerClusterSchema(dy.Schema):
    """One row per rendered marker, with its cluster placement."""

    marker_id = dy.String(nullable=False, primary_key=True)
    cluster_id = dy.String(nullable=False)
    lat = dy.Float64(nullable=False)
    lng = dy.Float64(nullable=False)
    centroid_lat = dy.Float64(nullable=False)
    centroid_lng = dy.Float64(nullable=False)
    offset_x = dy.Float64(nullable=False)
    offset_y = dy.Float64(nullable=False)
    rendered_lat = dy.Float64(nullable=False)
    rendered_lng = dy.Float64(nullable=False)
    cluster_size = dy.UInt32(nullable=False)
    is_clustered = dy.Bool(nullable=False)
    marker_size = dy.Float64(nullable=False)

    @dy.rule()
    def singletons_are_not_offset(cls) -> pl.Expr:
        """Markers alone in their cluster are drawn at the centroid."""
        return pl.col("is_clustered") | (
            (pl.col("offset_x") == 0.0) & (pl.col("offset_y") == 0.0)
        )

    @classmethod
    def build(cls, clusters: Sequence[Cluster]) -> dy.DataFrame["MarkerClusterSchema"]:
        rows = []
        for cluster in clusters:
            for member, offset, rendered in zip(
                cluster.members, cluster.offsets, cluster.rendered_positions()
            ):
                rows.append(
                    {
                        "marker_id": member.id,
                        "cluster_id": cluster.id,
                        "lat": member.lat,
                        "lng": member.lng,
                        "centroid_lat": cluster.centroid.lat,
                        "centroid_lng": cluster.centroid.lng,
                        "offset_x": offset.x,
                        "offset_y": offset.y,
                        "rendered_lat": rendered.lat,
                        "rendered_lng": rendered.lng,
                        "cluster_size": cluster.cluster_size,
                        "is_clustered": cluster.is_clustered,
                        "marker_size": cluster.marker_size,
                    }
                )

        df = pl.DataFrame(
            rows,
            schema={
                "marker_id": pl.String(),
                "cluster_id": pl.String(),
                "lat": pl.Float64(),
                "lng": pl.Float64(),
                "centroid_lat": pl.Float64(),
                "centroid_lng": pl.Float64(),
                "offset_x": pl.Float64(),
                "offset_y": pl.Float64(),
                "rendered_lat": pl.Float64(),
                "rendered_lng": pl.Float64(),
                "cluster_size": pl.UInt32(),
                "is_clustered": pl.Boolean(),
                "marker_size": pl.Float64(),
            },
        )
        return cls.validate(df)


def cluster_sizes(
    marker_cluster_dataframe: dy.DataFrame[MarkerClusterSchema],
) -> pl.DataFrame:
    """Cluster ids with their size and centroid, largest clusters first."""
    return (
        marker_cluster_dataframe.group_by("cluster_id", maintain_order=True)
        .agg(
            pl.col("cluster_size").first(),
            pl.col("centroid_lat").first(),
            pl.col("centroid_lng").first(),
        )
        .sort("cluster_size", descending=True, maintain_order=True)
    )
