"""
Optional latent embeddings for profile vectors.

The engine only depends on the narrow ``Embedder`` protocol: ``train(vectors)``
returns a trained encoder whose ``encode(vectors)`` yields comparable latent
vectors. ``AutoencoderEmbedder`` satisfies it with scikit-learn's
``MLPRegressor`` fitted to reconstruct its own input through a bottleneck.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import List, Optional, Protocol

import numpy as np

try:
    from sklearn.exceptions import ConvergenceWarning
    from sklearn.neural_network import MLPRegressor

    _SKLEARN_AVAILABLE = True
except Exception:  # pragma: no cover - optional dependency
    ConvergenceWarning = None  # type: ignore
    MLPRegressor = None  # type: ignore
    _SKLEARN_AVAILABLE = False

from .config import EmbeddingConfig

LOGGER = logging.getLogger(__name__)


class TrainedEncoder(Protocol):
    architecture: str

    def encode(self, vectors: np.ndarray) -> np.ndarray: ...


class Embedder(Protocol):
    def train(self, vectors: np.ndarray) -> TrainedEncoder: ...


@dataclass
class AutoencoderState:
    weights: List[np.ndarray]
    biases: List[np.ndarray]
    architecture: str
    train_loss: float
    validation_loss: Optional[float]

    def encode(self, vectors: np.ndarray) -> np.ndarray:
        hidden = np.atleast_2d(np.asarray(vectors, dtype=float))
        for weight, bias in zip(self.weights, self.biases):
            hidden = np.maximum(hidden @ weight + bias, 0.0)
        return hidden


def _split(n: int, fraction: float, rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    order = rng.permutation(n)
    n_val = min(n - 1, max(1, math.ceil(n * fraction))) if fraction > 0 else 0
    return order[n_val:], order[:n_val]


class AutoencoderEmbedder:
    """Dense ReLU autoencoder: input -> hidden layers -> latent -> mirrored decoder -> input."""

    def __init__(self, config: Optional[EmbeddingConfig] = None):
        self.config = config or EmbeddingConfig()

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        encoder = tuple(self.config.hidden_layers) + (self.config.latent_dim,)
        return encoder + tuple(reversed(self.config.hidden_layers))

    def train(self, vectors: np.ndarray) -> AutoencoderState:
        if not _SKLEARN_AVAILABLE:
            LOGGER.warning("scikit-learn is not installed; embeddings cannot be trained")
            raise RuntimeError("scikit-learn is required for autoencoder training")
        cfg = self.config
        data = np.asarray(vectors, dtype=float)
        if data.ndim != 2 or len(data) < 2:
            raise ValueError("Autoencoder training needs a 2-D array with at least two rows")
        rng = np.random.default_rng(cfg.random_state)
        train_idx, val_idx = _split(len(data), cfg.validation_split, rng)
        train = data[train_idx]

        model = MLPRegressor(
            hidden_layer_sizes=self.layer_sizes,
            activation="relu",
            solver="adam",
            learning_rate_init=cfg.learning_rate,
            batch_size=min(cfg.batch_size, len(train)),
            max_iter=cfg.epochs,
            shuffle=True,
            random_state=cfg.random_state,
        )
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", category=ConvergenceWarning)
            model.fit(train, train)

        validation_loss = None
        if len(val_idx):
            held_out = data[val_idx]
            validation_loss = float(np.mean((model.predict(held_out) - held_out) ** 2))
        depth = len(cfg.hidden_layers) + 1
        width = data.shape[1]
        state = AutoencoderState(
            weights=[w.copy() for w in model.coefs_[:depth]],
            biases=[b.copy() for b in model.intercepts_[:depth]],
            architecture=f"Autoencoder ({width}->{cfg.latent_dim}->{width})",
            train_loss=float(model.loss_),
            validation_loss=validation_loss,
        )
        LOGGER.info(
            "Autoencoder trained on %d vectors for %d epochs: loss=%.4f val_loss=%s",
            len(train), model.n_iter_, state.train_loss,
            "n/a" if validation_loss is None else f"{validation_loss:.4f}",
        )
        return state
