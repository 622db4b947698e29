from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv


DOMAIN_WEIGHTS: Dict[str, float] = {
    "mathematical": 0.30,
    "visual": 0.25,
    "technical": 0.25,
    "interaction": 0.20,
}

# Share of the final score taken by latent cosine similarity once embeddings exist.
EMBEDDING_BLEND = 0.3

FEEDBACK_MULTIPLIERS: Dict[str, float] = {
    "relevant": 1.0,
    "very_relevant": 2.0,
    "not_relevant": -1.0,
}

STRONG_CONNECTION = 0.7
MODERATE_CONNECTION = 0.4


@dataclass
class PipelinePaths:
    """Input/output paths used by the command line pipeline."""

    catalog_json: Path = Path("data/catalog.json")
    output_dir: Path = Path("output/ringgraph")


@dataclass
class GraphConfig:
    """Thresholds used when turning the similarity matrix into adjacency lists."""

    min_similarity_threshold: float = 0.3
    max_connections: int = 10
    cluster_threshold: float = 0.6
    min_cluster_size: int = 3


@dataclass
class EmbeddingConfig:
    """Parameters for the optional autoencoder embedding."""

    min_projects: int = 5
    latent_dim: int = 32
    hidden_layers: Tuple[int, ...] = (128, 64)
    learning_rate: float = 0.001
    batch_size: int = 8
    epochs: int = 100
    validation_split: float = 0.2
    random_state: Optional[int] = 42


@dataclass
class FeedbackConfig:
    learning_rate: float = 0.1
    multipliers: Dict[str, float] = field(default_factory=lambda: dict(FEEDBACK_MULTIPLIERS))


@dataclass
class EngineConfig:
    graph: GraphConfig = field(default_factory=GraphConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    seed: Optional[int] = None
    train_embeddings: bool = False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from ``RINGGRAPH_*`` environment variables (``.env`` aware)."""

        load_dotenv()
        config = cls()
        graph = config.graph
        graph.min_similarity_threshold = _env_float(
            "RINGGRAPH_MIN_SIMILARITY", graph.min_similarity_threshold
        )
        graph.max_connections = _env_int("RINGGRAPH_MAX_CONNECTIONS", graph.max_connections)
        graph.cluster_threshold = _env_float("RINGGRAPH_CLUSTER_THRESHOLD", graph.cluster_threshold)
        config.embedding.epochs = _env_int("RINGGRAPH_EPOCHS", config.embedding.epochs)
        config.feedback.learning_rate = _env_float(
            "RINGGRAPH_FEEDBACK_RATE", config.feedback.learning_rate
        )
        seed = os.getenv("RINGGRAPH_SEED")
        config.seed = int(seed) if seed else None
        config.train_embeddings = os.getenv("RINGGRAPH_TRAIN", "").lower() in {"1", "true", "yes"}
        return config


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
