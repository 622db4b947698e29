import unittest

import numpy as np

from catalog_fixtures import MidpointJitter, records
from ringgraph.catalog import parse_projects
from ringgraph.clusters import describe_cluster, find_clusters
from ringgraph.config import FeedbackConfig, GraphConfig
from ringgraph.errors import InvalidSignal
from ringgraph.feedback import FeedbackLearner, adjusted_similarity, parse_signal
from ringgraph.graph import ConnectionGraph
from ringgraph.profiles import build_profiles
from ringgraph.similarity import (
    SimilarityMatrix,
    cosine_similarity,
    explain_connection,
    pairwise_similarity,
    project_similarity,
    strength_label,
)


class SimilarityUnitTests(unittest.TestCase):
    def setUp(self):
        self.projects = parse_projects(records())
        self.profiles = build_profiles(self.projects, np.random.default_rng(seed=3))

    def test_similarity_is_symmetric_and_bounded(self):
        vectors = [self.profiles[p.id].vector for p in self.projects]
        rng = np.random.default_rng(seed=1)
        latent = rng.standard_normal((len(vectors), 4))
        for i in range(len(vectors)):
            for j in range(len(vectors)):
                forward = project_similarity(vectors[i], vectors[j], latent[i], latent[j])
                backward = project_similarity(vectors[j], vectors[i], latent[j], latent[i])
                self.assertAlmostEqual(forward, backward)
                self.assertGreaterEqual(forward, 0.0)
                self.assertLessEqual(forward, 1.0)

    def test_dense_matrix_matches_pairwise_scores(self):
        vectors = np.vstack([self.profiles[p.id].vector for p in self.projects])
        dense = pairwise_similarity(vectors)

        self.assertTrue(np.allclose(dense, dense.T))
        self.assertTrue(np.allclose(np.diag(dense), 0.0))
        self.assertAlmostEqual(dense[0, 3], project_similarity(vectors[0], vectors[3]))

    def test_fractal_pair_clears_the_graph_threshold(self):
        by_id = {p.id: p for p in self.projects}
        profiles = build_profiles([by_id["buddhabrot"], by_id["julia-explorer"]], MidpointJitter())
        score = project_similarity(profiles["buddhabrot"].vector, profiles["julia-explorer"].vector)

        self.assertGreaterEqual(score, 0.3)
        reason = explain_connection(
            profiles["buddhabrot"], profiles["julia-explorer"], "fractals", "fractals"
        )
        self.assertIn("Both feature fractal mathematics", reason)
        self.assertIn("Both belong to fractals category", reason)

    def test_zero_latent_vector_contributes_nothing(self):
        self.assertEqual(cosine_similarity(np.zeros(4), np.ones(4)), 0.0)

    def test_strength_labels(self):
        self.assertEqual(strength_label(0.71), "strong")
        self.assertEqual(strength_label(0.7), "moderate")
        self.assertEqual(strength_label(0.4), "weak")

    def test_matrix_rejects_self_pairs_and_clips(self):
        matrix = SimilarityMatrix()
        matrix.set("b", "a", 1.4)

        self.assertEqual(matrix.get("a", "b"), 1.0)
        self.assertEqual(matrix.get("a", "zzz"), 0.0)
        with self.assertRaises(ValueError):
            matrix.set("a", "a", 0.5)


class ConnectionGraphUnitTests(unittest.TestCase):
    def test_neighbors_are_capped_and_ties_broken_by_id(self):
        values = {("hub", f"n{i:02d}"): 0.9 for i in range(12)}
        values[("hub", "weak")] = 0.29
        graph = ConnectionGraph.from_matrix(SimilarityMatrix(values), GraphConfig())

        neighbors = graph.neighbors("hub")
        self.assertEqual(len(neighbors), 10)
        self.assertEqual([pid for pid, _ in neighbors], [f"n{i:02d}" for i in range(10)])
        self.assertEqual(graph.degree("n11"), 1)
        self.assertNotIn("weak", graph)

    def test_patch_inserts_reorders_and_drops(self):
        matrix = SimilarityMatrix({("a", "b"): 0.5, ("a", "c"): 0.4, ("a", "d"): 0.2})
        graph = ConnectionGraph.from_matrix(matrix)

        graph.patch("a", "d", 0.6)
        self.assertEqual([pid for pid, _ in graph.neighbors("a")], ["d", "b", "c"])
        self.assertEqual(graph.neighbors("d"), [("a", 0.6)])

        graph.patch("a", "c", 0.1)
        self.assertEqual([pid for pid, _ in graph.neighbors("a")], ["d", "b"])
        self.assertEqual(graph.neighbors("c"), [])


class FeedbackUnitTests(unittest.TestCase):
    def setUp(self):
        self.matrix = SimilarityMatrix({("a", "b"): 0.2, ("a", "c"): 0.5, ("b", "c"): 0.9})
        self.graph = ConnectionGraph.from_matrix(self.matrix)
        self.learner = FeedbackLearner(self.matrix, self.graph)

    def test_very_relevant_moves_toward_one_and_enters_graph(self):
        updated = self.learner.apply("a", "b", "very_relevant")

        self.assertAlmostEqual(updated, 0.36)
        self.assertAlmostEqual(self.matrix.get("b", "a"), 0.36)
        self.assertIn("b", [pid for pid, _ in self.graph.neighbors("a")])

    def test_not_relevant_moves_toward_zero(self):
        self.assertAlmostEqual(self.learner.apply("c", "a", "not_relevant"), 0.45)
        self.assertAlmostEqual(dict(self.graph.neighbors("a"))["c"], 0.45)

    def test_relevant_feedback_stays_bounded(self):
        for _ in range(200):
            value = self.learner.apply("b", "c", "relevant")
        self.assertLessEqual(value, 1.0)
        self.assertAlmostEqual(
            adjusted_similarity(0.0, parse_signal("not_relevant"), FeedbackConfig()), 0.0
        )

    def test_invalid_signal_leaves_state_untouched(self):
        with self.assertRaises(InvalidSignal):
            self.learner.apply("a", "b", "meh")
        self.assertEqual(self.matrix.get("a", "b"), 0.2)
        self.assertEqual(self.graph.degree("a"), 1)


class ClusterUnitTests(unittest.TestCase):
    def test_only_groups_of_three_or_more_become_clusters(self):
        matrix = SimilarityMatrix(
            {
                ("a", "b"): 0.8,
                ("b", "c"): 0.7,
                ("a", "c"): 0.5,
                ("d", "e"): 0.9,
                ("c", "d"): 0.55,
            }
        )
        graph = ConnectionGraph.from_matrix(matrix)

        clusters = find_clusters(["a", "b", "c", "d", "e"], graph, matrix)

        self.assertEqual(len(clusters), 1)
        self.assertEqual(set(clusters[0].members), {"a", "b", "c"})
        self.assertAlmostEqual(clusters[0].cohesion, (0.8 + 0.7 + 0.5) / 3)

    def test_contemplative_fractal_cluster_title(self):
        projects = parse_projects(records())
        by_id = {p.id: p for p in projects}
        profiles = build_profiles(projects, MidpointJitter())

        title, _ = describe_cluster(["buddhabrot", "julia-explorer"], by_id, profiles)

        self.assertEqual(title, "Contemplative Fractals")


if __name__ == "__main__":
    unittest.main()
