import unittest

from carescape.cluster import cluster_markers
from carescape.zoom import scale_clusters, zoom_factor
from test.fixtures.color_records import mock_markers


class TestZoomFactor(unittest.TestCase):
    def test_bounds(self):
        self.assertEqual(zoom_factor(2), 0.5)
        self.assertEqual(zoom_factor(14), 2.0)

    def test_clamped_outside_range(self):
        self.assertEqual(zoom_factor(0), 0.5)
        self.assertEqual(zoom_factor(-3), 0.5)
        self.assertEqual(zoom_factor(22), 2.0)

    def test_linear_between_bounds(self):
        self.assertAlmostEqual(zoom_factor(8), 1.25)
        self.assertAlmostEqual(zoom_factor(9), 1.375)

    def test_custom_scale_range(self):
        self.assertAlmostEqual(zoom_factor(8, min_scale=1.0, max_scale=3.0), 2.0)

    def test_monotone_and_bounded(self):
        zooms = [z / 2 for z in range(0, 45)]
        factors = [zoom_factor(z) for z in zooms]
        for lower, higher in zip(factors, factors[1:]):
            self.assertLessEqual(lower, higher)
        for factor in factors:
            self.assertGreaterEqual(factor, 0.5)
            self.assertLessEqual(factor, 2.0)

    def test_infinite_zoom_clamps(self):
        self.assertEqual(zoom_factor(float("inf")), 2.0)
        self.assertEqual(zoom_factor(float("-inf")), 0.5)

    def test_nan_zoom(self):
        with self.assertRaises(ValueError):
            zoom_factor(float("nan"))


class TestScaleClusters(unittest.TestCase):
    def setUp(self):
        markers = mock_markers([(0, 0), (0, 0.001), (5, 5)])
        self.clusters = cluster_markers(markers, 0.01)

    def test_scales_size_and_offsets(self):
        scaled = scale_clusters(self.clusters, 14)
        pair = scaled[0]
        self.assertEqual(pair.scale, 2.0)
        self.assertEqual(pair.marker_size, 40.0)
        self.assertAlmostEqual(pair.offsets[0].x, 0.16)
        self.assertEqual(pair.base_offsets, self.clusters[0].base_offsets)

    def test_singletons_stay_unoffset(self):
        singleton = scale_clusters(self.clusters, 14)[1]
        self.assertEqual(singleton.offsets[0].x, 0.0)
        self.assertEqual(singleton.offsets[0].y, 0.0)
        self.assertEqual(singleton.marker_size, 40.0)

    def test_does_not_compound(self):
        once = scale_clusters(self.clusters, 2)
        twice = scale_clusters(once, 2)
        self.assertEqual(once, twice)
        self.assertEqual(twice[0].marker_size, 10.0)

    def test_membership_is_unchanged(self):
        scaled = scale_clusters(self.clusters, 5)
        self.assertEqual(
            [c.member_ids() for c in scaled], [c.member_ids() for c in self.clusters]
        )
        self.assertEqual([c.centroid for c in scaled], [c.centroid for c in self.clusters])

    def test_input_is_not_mutated(self):
        scale_clusters(self.clusters, 14)
        self.assertEqual(self.clusters[0].scale, 1.0)
        self.assertEqual(self.clusters[0].marker_size, 20.0)


if __name__ == "__main__":
    unittest.main()
