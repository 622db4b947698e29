"""
Connection engine for one catalog snapshot.

The engine derives a feature profile per project, fills the pairwise
similarity matrix, caps it into ranked adjacency lists and answers
recommendation, clustering, feedback, export and analytics queries. Construct
one engine per catalog snapshot and pass it to whoever needs it; ``reload``
replaces every derived structure wholesale.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from pydantic import ValidationError

from .catalog import Project, ProjectLike, parse_projects
from .clusters import collection_from_members, find_clusters
from .config import EngineConfig, MODERATE_CONNECTION, STRONG_CONNECTION
from .embedding import AutoencoderEmbedder, Embedder, TrainedEncoder
from .errors import NotFound
from .export import build_graph_payload, matrix_edges, render
from .feedback import FeedbackLearner, FeedbackSignal
from .graph import ConnectionGraph
from .heuristics import JitterSource
from .profiles import FeatureProfile, build_profiles, feature_frame, profile_matrix
from .schemas import (
    Collection,
    ComplexityStats,
    ConnectionBuckets,
    EmbeddingStatus,
    MostConnected,
    NetworkAnalytics,
    ProjectAnalytics,
    Ranking,
    RelatedProject,
    SimilarityResult,
    TrainingReport,
)
from .similarity import (
    SimilarityMatrix,
    domain_similarities,
    explain_connection,
    pairwise_similarity,
    project_similarity,
    strength_label,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class _EmbeddingSnapshot:
    encoder: TrainedEncoder
    latent: Dict[str, np.ndarray]
    trained_at: str


def _curated(records: Sequence[Mapping[str, Any]]) -> List[Collection]:
    collections = []
    for record in records:
        try:
            collections.append(Collection.model_validate({"curated": True, **dict(record)}))
        except ValidationError as exc:
            LOGGER.warning("Skipping curated collection %r: %s", record.get("id"), exc.errors()[0]["msg"])
    return collections


class ConnectionEngine:
    def __init__(
        self,
        records: Iterable[ProjectLike],
        config: Optional[EngineConfig] = None,
        rng: Optional[JitterSource] = None,
        embedder: Optional[Embedder] = None,
        curated_collections: Optional[Sequence[Mapping[str, Any]]] = None,
    ):
        self.config = config or EngineConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.embedder = embedder or AutoencoderEmbedder(self.config.embedding)
        self.curated = _curated(curated_collections or [])
        self._lock = threading.RLock()
        self._embedding: Optional[_EmbeddingSnapshot] = None
        self._generation = 0
        self._load(records)

    # ------------------------------------------------------------------ build

    def _load(self, records: Iterable[ProjectLike]) -> None:
        projects = parse_projects(records)
        profiles = build_profiles(projects, self.rng)
        ids = [p.id for p in projects]
        vectors = profile_matrix(profiles, ids)
        matrix = SimilarityMatrix.from_dense(ids, pairwise_similarity(vectors))
        graph = ConnectionGraph.from_matrix(matrix, self.config.graph)
        with self._lock:
            self.projects: List[Project] = projects
            self._by_id: Dict[str, Project] = {p.id: p for p in projects}
            self.profiles: Dict[str, FeatureProfile] = profiles
            self._vectors = {pid: vectors[i] for i, pid in enumerate(ids)}
            self._embedding = None
            self._generation += 1
            self._install(matrix, graph)
        LOGGER.info(
            "Connection engine ready: %d projects, %d pairs, %d connected projects",
            len(projects), len(matrix), len(graph),
        )

    def _install(self, matrix: SimilarityMatrix, graph: ConnectionGraph) -> None:
        self.matrix = matrix
        self.graph = graph
        self.learner = FeedbackLearner(matrix, graph, self.config.feedback, self._lock)

    def reload(self, records: Iterable[ProjectLike]) -> None:
        """Recompute profiles, matrix and graph for a new catalog; embeddings are dropped."""

        self._load(records)

    def _require(self, *project_ids: str) -> None:
        for project_id in project_ids:
            if project_id not in self._by_id:
                raise NotFound(project_id)

    @property
    def is_trained(self) -> bool:
        return self._embedding is not None

    def project(self, project_id: str) -> Project:
        self._require(project_id)
        return self._by_id[project_id]

    def profile(self, project_id: str) -> FeatureProfile:
        self._require(project_id)
        return self.profiles[project_id]

    # ------------------------------------------------------------ similarity

    def compute_similarity(self, id1: str, id2: str) -> float:
        """Similarity computed from the two profiles alone; the matrix is not consulted."""

        self._require(id1, id2)
        if id1 == id2:
            return 1.0
        embedding = self._embedding
        latent1 = latent2 = None
        if embedding is not None:
            latent1, latent2 = embedding.latent.get(id1), embedding.latent.get(id2)
        return project_similarity(self._vectors[id1], self._vectors[id2], latent1, latent2)

    def get_similarity(self, id1: str, id2: str) -> float:
        with self._lock:
            return self.matrix.get(id1, id2)

    def explain_connection(self, id1: str, id2: str) -> str:
        self._require(id1, id2)
        return explain_connection(
            self.profiles[id1], self.profiles[id2],
            self._by_id[id1].category, self._by_id[id2].category,
        )

    def similarity(self, id1: str, id2: str) -> SimilarityResult:
        score = self.compute_similarity(id1, id2)
        stored = 1.0 if id1 == id2 else self.get_similarity(id1, id2)
        return SimilarityResult(
            project1=id1,
            project2=id2,
            score=score,
            stored=stored,
            explanation=self.explain_connection(id1, id2),
            strength=strength_label(score),
            domains=domain_similarities(self._vectors[id1], self._vectors[id2]),
        )

    def related_projects(self, project_id: str, limit: int = 5) -> List[RelatedProject]:
        self._require(project_id)
        with self._lock:
            edges = self.graph.related(project_id, limit)
        related = []
        for neighbor_id, strength in edges:
            neighbor = self._by_id.get(neighbor_id)
            related.append(
                RelatedProject(
                    id=neighbor_id,
                    similarity=strength,
                    reason=self.explain_connection(project_id, neighbor_id),
                    title=neighbor.title if neighbor else None,
                    category=neighbor.category if neighbor else None,
                )
            )
        return related

    # ------------------------------------------------------------ collections

    def generate_collections(self, include_curated: bool = False) -> List[Collection]:
        with self._lock:
            clusters = find_clusters([p.id for p in self.projects], self.graph, self.matrix)
            generated = [
                collection_from_members(
                    cluster.members, self._by_id, self.profiles, self.matrix, cluster.cohesion
                )
                for cluster in clusters
            ]
        if include_curated:
            return [c.model_copy() for c in self.curated] + generated
        return generated

    def seed_collection(
        self, seed_id: str, min_similarity: float = 0.5, max_projects: int = 8
    ) -> Collection:
        """Collection built around one project from its precomputed neighbors."""

        self._require(seed_id)
        with self._lock:
            neighbors = [
                pid for pid, strength in self.graph.neighbors(seed_id) if strength >= min_similarity
            ]
            members = [seed_id] + neighbors[: max(0, max_projects - 1)]
            return collection_from_members(members, self._by_id, self.profiles, self.matrix)

    # --------------------------------------------------------------- feedback

    def apply_feedback(self, id1: str, id2: str, signal: Union[str, FeedbackSignal]) -> float:
        self._require(id1, id2)
        with self._lock:
            return self.learner.apply(id1, id2, signal)

    # --------------------------------------------------------------- training

    async def train(self) -> TrainingReport:
        """Fit the embedder in a worker thread and swap in the blended similarity.

        Cancellation or a failure leaves the previous embeddings, matrix and
        graph untouched.
        """

        cfg = self.config.embedding
        with self._lock:
            generation = self._generation
            ids = [p.id for p in self.projects]
            vectors = profile_matrix(self.profiles, ids)
        if len(ids) < cfg.min_projects:
            LOGGER.warning(
                "Not enough projects for embedding training (%d < %d)", len(ids), cfg.min_projects
            )
            return TrainingReport(
                status="skipped",
                project_count=len(ids),
                message=f"At least {cfg.min_projects} projects required for embedding training",
            )

        LOGGER.info("Training embeddings on %d projects", len(ids))
        try:
            encoder, matrix, latent = await asyncio.to_thread(self._fit, ids, vectors)
        except asyncio.CancelledError:
            LOGGER.warning("Embedding training cancelled; keeping previous state")
            raise
        except Exception:
            LOGGER.exception("Embedding training failed; keeping previous state")
            raise

        trained_at = datetime.now(timezone.utc).isoformat()
        graph = ConnectionGraph.from_matrix(matrix, self.config.graph)
        with self._lock:
            if self._generation != generation:
                LOGGER.warning("Catalog changed during training; discarding embeddings")
                return TrainingReport(
                    status="skipped", project_count=len(self.projects),
                    message="Catalog reloaded while training",
                )
            self._embedding = _EmbeddingSnapshot(encoder=encoder, latent=latent, trained_at=trained_at)
            self._install(matrix, graph)
        return TrainingReport(
            status="trained", project_count=len(ids),
            message="Embedding training completed", trained_at=trained_at,
        )

    def _fit(self, ids: List[str], vectors: np.ndarray):
        encoder = self.embedder.train(vectors)
        latent = np.asarray(encoder.encode(vectors), dtype=float)
        dense = pairwise_similarity(vectors, latent)
        matrix = SimilarityMatrix.from_dense(ids, dense)
        return encoder, matrix, {pid: latent[i] for i, pid in enumerate(ids)}

    def embedding_status(self) -> EmbeddingStatus:
        cfg = self.config.embedding
        embedding = self._embedding
        return EmbeddingStatus(
            is_trained=embedding is not None,
            architecture=embedding.encoder.architecture if embedding else "Not trained",
            project_count=len(self.projects),
            min_projects_required=cfg.min_projects,
            can_train=len(self.projects) >= cfg.min_projects,
            last_trained_at=embedding.trained_at if embedding else None,
            validation_loss=getattr(embedding.encoder, "validation_loss", None) if embedding else None,
        )

    # ----------------------------------------------------------------- export

    def graph_payload(self, threshold: Optional[float] = None) -> Dict[str, Any]:
        """Default export mirrors the live adjacency lists; a threshold reads the matrix instead."""

        with self._lock:
            if threshold is None:
                edges = self.graph.edges()
            else:
                edges = matrix_edges(self.matrix, threshold)
            return build_graph_payload(self.projects, self.profiles, edges)

    def export_graph(self, fmt: str = "json", threshold: Optional[float] = None) -> str:
        return render(self.graph_payload(threshold), fmt)

    def feature_table(self) -> pd.DataFrame:
        return feature_frame(self.projects, self.profiles)

    def export_features(self) -> str:
        return self.feature_table().to_csv(index=False)

    # -------------------------------------------------------------- analytics

    def _most_connected(self) -> MostConnected:
        best: Optional[str] = None
        count = 0
        for project in self.projects:
            degree = self.graph.degree(project.id)
            if degree > count:
                best, count = project.id, degree
        return MostConnected(
            project_id=best,
            title=self._by_id[best].title if best else None,
            connection_count=count,
        )

    def network_analytics(self) -> NetworkAnalytics:
        categories = pd.Series([p.category for p in self.projects], dtype=object)
        types = pd.Series([p.type for p in self.projects], dtype=object)
        complexity = pd.Series([self.profiles[p.id].complexity for p in self.projects], dtype=float)
        stats = ComplexityStats()
        if not complexity.empty:
            stats = ComplexityStats(
                min=float(complexity.min()),
                max=float(complexity.max()),
                average=float(complexity.mean()),
                median=float(complexity.median()),
            )
        with self._lock:
            return NetworkAnalytics(
                total_projects=len(self.projects),
                total_connections=len(self.matrix),
                average_similarity=self.matrix.mean(),
                cluster_count=len(find_clusters([p.id for p in self.projects], self.graph, self.matrix)),
                most_connected=self._most_connected(),
                category_distribution={str(k): int(v) for k, v in categories.value_counts().items()},
                type_distribution={str(k): int(v) for k, v in types.value_counts().items()},
                complexity_stats=stats,
                embedding_status=self.embedding_status(),
            )

    def _ranking(self, project_id: str, scores: Mapping[str, float]) -> Ranking:
        ordered = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        position = next(i for i, (pid, _) in enumerate(ordered, start=1) if pid == project_id)
        total = len(ordered)
        return Ranking(
            position=position,
            total=total,
            percentile=round((1 - (position - 1) / total) * 100),
            score=float(scores[project_id]),
        )

    def project_analytics(self, project_id: str) -> ProjectAnalytics:
        self._require(project_id)
        profile = self.profiles[project_id]
        with self._lock:
            strengths = [s for _, s in self.graph.neighbors(project_id)]
            degrees = {p.id: float(self.graph.degree(p.id)) for p in self.projects}
        buckets = ConnectionBuckets(
            total=len(strengths),
            strong=sum(s > STRONG_CONNECTION for s in strengths),
            moderate=sum(MODERATE_CONNECTION <= s <= STRONG_CONNECTION for s in strengths),
            weak=sum(s < MODERATE_CONNECTION for s in strengths),
        )
        return ProjectAnalytics(
            project_id=project_id,
            title=self._by_id[project_id].title,
            connections=buckets,
            complexity=profile.complexity,
            mathematical=profile.true_flags(),
            tags=list(profile.tags),
            rank_by_connections=self._ranking(project_id, degrees),
            rank_by_complexity=self._ranking(
                project_id, {pid: p.complexity for pid, p in self.profiles.items()}
            ),
        )
