import unittest

import polars as pl

from carescape.cluster import cluster_markers
from carescape.dataframes.marker_cluster import MarkerClusterSchema, cluster_sizes
from carescape.zoom import scale_clusters
from test.fixtures.color_records import mock_markers


class TestMarkerClusterSchema(unittest.TestCase):
    def setUp(self):
        markers = mock_markers([(5, 5), (0, 0), (0, 0.001), (0, -0.001)])
        self.clusters = scale_clusters(cluster_markers(markers, 0.01), zoom=8)

    def test_build(self):
        df = MarkerClusterSchema.build(self.clusters)

        self.assertEqual(df["marker_id"].to_list(), ["a", "b", "c", "d"])
        self.assertEqual(
            df["cluster_id"].to_list(),
            ["cluster-a", "cluster-b", "cluster-b", "cluster-b"],
        )
        self.assertEqual(df["cluster_size"].to_list(), [1, 3, 3, 3])
        self.assertEqual(df["is_clustered"].to_list(), [False, True, True, True])
        self.assertEqual(df["marker_size"].to_list(), [25.0, 25.0, 25.0, 25.0])

        row = df.row(1, named=True)
        self.assertAlmostEqual(row["offset_x"], 0.08 * 1.25)
        self.assertAlmostEqual(row["rendered_lng"], row["centroid_lng"] + row["offset_x"])
        self.assertAlmostEqual(row["rendered_lat"], row["centroid_lat"] + row["offset_y"])

    def test_build_empty(self):
        df = MarkerClusterSchema.build([])
        self.assertEqual(df.height, 0)

    def test_offset_singleton_is_rejected(self):
        df = MarkerClusterSchema.build(self.clusters).with_columns(
            offset_x=pl.lit(1.0)
        )
        self.assertFalse(MarkerClusterSchema.is_valid(df))
        self.assertTrue(
            MarkerClusterSchema.is_valid(MarkerClusterSchema.build(self.clusters))
        )

    def test_cluster_sizes(self):
        sizes = cluster_sizes(MarkerClusterSchema.build(self.clusters))
        self.assertEqual(sizes["cluster_id"].to_list(), ["cluster-b", "cluster-a"])
        self.assertEqual(sizes["cluster_size"].to_list(), [3, 1])
        self.assertAlmostEqual(sizes["centroid_lat"][0], 0.0)


if __name__ == "__main__":
    unittest.main()
