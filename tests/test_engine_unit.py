import asyncio
import json
import tempfile
import threading
import unittest
from pathlib import Path

import networkx as nx

from catalog_fixtures import MidpointJitter, catalog_document, records
from ringgraph import ConnectionEngine, EngineConfig, NotFound, PipelinePaths, UnsupportedFormat, run_pipeline
from ringgraph.config import EmbeddingConfig
from ringgraph.embedding import AutoencoderEmbedder
from ringgraph.export import parse_json_graph


def small_embedding_config():
    return EngineConfig(
        embedding=EmbeddingConfig(hidden_layers=(16,), latent_dim=4, epochs=5, batch_size=4),
        seed=7,
    )


class FailingEmbedder:
    def train(self, vectors):
        raise RuntimeError("boom")


class GatedEmbedder:
    """Waits for ``release`` before delegating, so a test can act mid-training."""

    def __init__(self, inner):
        self.inner = inner
        self.started = threading.Event()
        self.release = threading.Event()

    def train(self, vectors):
        self.started.set()
        self.release.wait(timeout=30)
        return self.inner.train(vectors)


class EngineQueryUnitTests(unittest.TestCase):
    def setUp(self):
        self.engine = ConnectionEngine(records(), rng=MidpointJitter())

    def test_related_projects_come_from_the_ranked_graph(self):
        related = self.engine.related_projects("buddhabrot", limit=3)

        self.assertLessEqual(len(related), 3)
        self.assertEqual(related[0].id, "julia-explorer")
        strengths = [r.similarity for r in related]
        self.assertEqual(strengths, sorted(strengths, reverse=True))
        self.assertTrue(all(s >= 0.3 for s in strengths))

    def test_unknown_ids_raise_not_found(self):
        with self.assertRaises(NotFound):
            self.engine.related_projects("nope")
        with self.assertRaises(NotFound):
            self.engine.similarity("buddhabrot", "nope")
        with self.assertRaises(NotFound):
            self.engine.apply_feedback("nope", "buddhabrot", "relevant")

    def test_similarity_reports_fresh_and_stored_scores(self):
        before = self.engine.similarity("buddhabrot", "substrate")
        self.engine.apply_feedback("buddhabrot", "substrate", "very_relevant")
        after = self.engine.similarity("substrate", "buddhabrot")

        self.assertAlmostEqual(before.score, after.score)
        self.assertAlmostEqual(before.score, before.stored)
        self.assertGreater(after.stored, before.stored)
        self.assertEqual(set(after.domains), {"mathematical", "visual", "technical", "interaction"})
        self.assertEqual(self.engine.similarity("substrate", "substrate").score, 1.0)

    def test_feedback_is_visible_in_related_projects(self):
        for _ in range(30):
            self.engine.apply_feedback("substrate", "particle-swarm", "very_relevant")

        related = self.engine.related_projects("substrate", limit=1)
        self.assertEqual(related[0].id, "particle-swarm")

    def test_collections(self):
        engine = ConnectionEngine(
            records(), rng=MidpointJitter(), curated_collections=catalog_document()["collections"]
        )
        generated = engine.generate_collections()
        with_curated = engine.generate_collections(include_curated=True)

        self.assertTrue(all(len(c.projects) >= 3 and c.auto_generated for c in generated))
        self.assertEqual(with_curated[0].id, "chaos")
        self.assertTrue(with_curated[0].curated)
        self.assertEqual(len(with_curated), len(generated) + 1)

        seeded = engine.seed_collection("buddhabrot", min_similarity=0.0, max_projects=3)
        self.assertEqual(seeded.projects[0], "buddhabrot")
        self.assertEqual(len(seeded.projects), 3)

    def test_export_formats(self):
        node_ids, edges = parse_json_graph(self.engine.export_graph("json"))
        self.assertEqual(node_ids, {r["id"] for r in records()})
        expected = {(a, b, round(w, 6)) for a, b, w in self.engine.graph.edges()}
        self.assertEqual(edges, expected)

        graph = nx.parse_graphml(self.engine.export_graph("graphml"))
        self.assertEqual(graph.number_of_edges(), len(expected))
        self.assertTrue(self.engine.export_graph("dot").startswith("graph RingGraphConnections {"))
        self.assertTrue(self.engine.export_graph("CSV").startswith("Source,Target,Weight,Type"))

        _, everything = parse_json_graph(self.engine.export_graph("json", threshold=0.0))
        self.assertEqual(len(everything), 15)

        with self.assertRaises(UnsupportedFormat):
            self.engine.export_graph("yaml")

    def test_default_export_matches_capped_adjacency(self):
        clones = []
        for i in range(13):
            record = records(1)[0]
            record["id"] = f"lorenz-{i:02d}"
            clones.append(record)
        engine = ConnectionEngine(clones, rng=MidpointJitter())
        engine.apply_feedback("lorenz-00", "lorenz-12", "not_relevant")

        _, edges = parse_json_graph(engine.export_graph("json"))

        live = {(a, b, round(w, 6)) for a, b, w in engine.graph.edges()}
        self.assertEqual(edges, live)
        self.assertLess(len(edges), len(engine.matrix))
        self.assertTrue(all(engine.graph.degree(pid) <= 10 for pid in (r["id"] for r in clones)))

    def test_network_analytics(self):
        analytics = self.engine.network_analytics()

        self.assertEqual(analytics.total_projects, 6)
        self.assertEqual(analytics.total_connections, 15)
        self.assertEqual(analytics.category_distribution["fractals"], 2)
        self.assertEqual(analytics.type_distribution["static_generative"], 3)
        self.assertGreater(analytics.most_connected.connection_count, 0)
        self.assertLessEqual(analytics.complexity_stats.min, analytics.complexity_stats.median)
        self.assertFalse(analytics.embedding_status.is_trained)
        self.assertTrue(analytics.embedding_status.can_train)

    def test_project_analytics(self):
        report = self.engine.project_analytics("lorenz-attractor")

        self.assertEqual(report.mathematical, ["has_attractors"])
        self.assertEqual(report.rank_by_complexity.position, 2)
        self.assertEqual(report.rank_by_complexity.percentile, 83)
        self.assertEqual(self.engine.project_analytics("particle-swarm").rank_by_complexity.percentile, 100)
        self.assertEqual(
            report.connections.total,
            report.connections.strong + report.connections.moderate + report.connections.weak,
        )

    def test_empty_catalog(self):
        engine = ConnectionEngine([])
        analytics = engine.network_analytics()

        self.assertEqual(analytics.total_projects, 0)
        self.assertEqual(analytics.average_similarity, 0.0)
        self.assertIsNone(analytics.most_connected.project_id)
        self.assertEqual(engine.generate_collections(), [])


class EngineTrainingUnitTests(unittest.TestCase):
    def test_small_catalog_is_never_trained(self):
        engine = ConnectionEngine(records(4), small_embedding_config())

        report = asyncio.run(engine.train())

        self.assertEqual(report.status, "skipped")
        self.assertFalse(engine.network_analytics().embedding_status.is_trained)

    def test_training_swaps_in_blended_similarity(self):
        engine = ConnectionEngine(records(), small_embedding_config())

        report = asyncio.run(engine.train())

        self.assertEqual(report.status, "trained")
        status = engine.embedding_status()
        self.assertTrue(status.is_trained)
        self.assertEqual(status.architecture, "Autoencoder (64->4->64)")
        self.assertIsNotNone(status.last_trained_at)
        for (a, b), value in engine.matrix.items():
            self.assertAlmostEqual(value, engine.compute_similarity(a, b))

    def test_failed_training_keeps_previous_state(self):
        engine = ConnectionEngine(records(), small_embedding_config(), embedder=FailingEmbedder())
        before = dict(engine.matrix.items())

        with self.assertRaises(RuntimeError):
            asyncio.run(engine.train())

        self.assertFalse(engine.is_trained)
        self.assertEqual(dict(engine.matrix.items()), before)

    def test_reload_drops_embeddings(self):
        engine = ConnectionEngine(records(), small_embedding_config())
        asyncio.run(engine.train())

        engine.reload(records(3))

        self.assertFalse(engine.is_trained)
        self.assertEqual(len(engine.matrix), 3)

    def test_reload_with_same_ids_during_training_discards_result(self):
        config = small_embedding_config()
        embedder = GatedEmbedder(AutoencoderEmbedder(config.embedding))
        engine = ConnectionEngine(records(), config, embedder=embedder)
        changed = records()
        for record in changed:
            record["category"] = "zzz"
            record["technicalDetails"] = {}
            record["experience"] = {}

        async def reload_mid_training():
            task = asyncio.create_task(engine.train())
            await asyncio.to_thread(embedder.started.wait, 30)
            engine.reload(changed)
            embedder.release.set()
            return await task

        report = asyncio.run(reload_mid_training())

        self.assertEqual(report.status, "skipped")
        self.assertFalse(engine.is_trained)
        self.assertEqual({p.category for p in engine.projects}, {"zzz"})
        for (a, b), value in engine.matrix.items():
            self.assertAlmostEqual(value, engine.compute_similarity(a, b))


class PipelineUnitTests(unittest.TestCase):
    def test_pipeline_writes_all_artifacts(self):
        with tempfile.TemporaryDirectory() as tmp:
            catalog_path = Path(tmp) / "catalog.json"
            catalog_path.write_text(json.dumps(catalog_document()), encoding="utf-8")
            paths = PipelinePaths(catalog_json=catalog_path, output_dir=Path(tmp) / "out")

            outputs = run_pipeline(paths, EngineConfig(seed=1), train=False)

            for path in outputs.values():
                self.assertTrue(path.exists(), path)
            metadata = json.loads(outputs["metadata"].read_text(encoding="utf-8"))
            self.assertEqual(metadata["n_projects"], 6)
            self.assertEqual(metadata["training_status"], "not_requested")
            self.assertIn("graph_graphml", outputs)


if __name__ == "__main__":
    unittest.main()
