"""
Pairwise similarity between feature profiles.

Every domain compares matching attributes with a fixed weight table: an
attribute contributes ``weight * (1 - |a - b|)``. Boolean attributes are stored
as 0/1 in the profile vector, so the same expression gives them their full
weight when equal and nothing otherwise. Domain scores are blended with
``DOMAIN_WEIGHTS`` and, when embeddings exist, with latent cosine similarity.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .config import DOMAIN_WEIGHTS, EMBEDDING_BLEND, MODERATE_CONNECTION, STRONG_CONNECTION
from .heuristics import DOMAINS
from .profiles import FEATURE_NAMES, FeatureProfile

PairKey = Tuple[str, str]

DOMAIN_ORDER: Tuple[str, ...] = tuple(DOMAINS)


def _weight_matrix() -> np.ndarray:
    index = {name: i for i, name in enumerate(FEATURE_NAMES)}
    weights = np.zeros((len(FEATURE_NAMES), len(DOMAIN_ORDER)))
    for col, domain in enumerate(DOMAIN_ORDER):
        for attr, weight in DOMAINS[domain].SIMILARITY_WEIGHTS.items():
            weights[index[f"{domain}.{attr}"], col] = weight
    return weights


ATTRIBUTE_WEIGHTS = _weight_matrix()
DOMAIN_WEIGHT_VECTOR = np.array([DOMAIN_WEIGHTS[d] for d in DOMAIN_ORDER])


def pair_key(id1: str, id2: str) -> PairKey:
    return (id1, id2) if id1 < id2 else (id2, id1)


def domain_similarities(vec1: np.ndarray, vec2: np.ndarray) -> Dict[str, float]:
    closeness = 1.0 - np.abs(vec1 - vec2)
    scores = np.clip(closeness @ ATTRIBUTE_WEIGHTS, 0.0, 1.0)
    return {domain: float(score) for domain, score in zip(DOMAIN_ORDER, scores)}


def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    norm = float(np.linalg.norm(vec1) * np.linalg.norm(vec2))
    if norm == 0.0 or not np.isfinite(norm):
        return 0.0
    return float(np.dot(vec1, vec2) / norm)


def blend(base: float, cosine: Optional[float]) -> float:
    if cosine is None:
        return float(np.clip(base, 0.0, 1.0))
    return float(np.clip(base * (1 - EMBEDDING_BLEND) + cosine * EMBEDDING_BLEND, 0.0, 1.0))


def project_similarity(
    vec1: np.ndarray,
    vec2: np.ndarray,
    latent1: Optional[np.ndarray] = None,
    latent2: Optional[np.ndarray] = None,
) -> float:
    base = float(np.dot(list(domain_similarities(vec1, vec2).values()), DOMAIN_WEIGHT_VECTOR))
    cosine = None
    if latent1 is not None and latent2 is not None:
        cosine = cosine_similarity(latent1, latent2)
    return blend(base, cosine)


def _row_normalize(latent: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(latent, axis=1, keepdims=True)
    safe = np.where(norms == 0, 1.0, norms)
    return np.where(norms == 0, 0.0, latent / safe)


def pairwise_similarity(vectors: np.ndarray, latent: Optional[np.ndarray] = None) -> np.ndarray:
    """Dense symmetric matrix of blended similarities; the diagonal is zero."""

    n = len(vectors)
    result = np.zeros((n, n))
    cosines = None
    if latent is not None and n:
        unit = _row_normalize(np.asarray(latent, dtype=float))
        cosines = unit @ unit.T
    for i in range(n - 1):
        closeness = 1.0 - np.abs(vectors[i + 1:] - vectors[i])
        domains = np.clip(closeness @ ATTRIBUTE_WEIGHTS, 0.0, 1.0)
        row = domains @ DOMAIN_WEIGHT_VECTOR
        if cosines is not None:
            row = row * (1 - EMBEDDING_BLEND) + cosines[i, i + 1:] * EMBEDDING_BLEND
        row = np.clip(row, 0.0, 1.0)
        result[i, i + 1:] = row
        result[i + 1:, i] = row
    return result


def strength_label(score: float) -> str:
    if score > STRONG_CONNECTION:
        return "strong"
    if score > MODERATE_CONNECTION:
        return "moderate"
    return "weak"


def explain_connection(
    profile1: FeatureProfile, profile2: FeatureProfile, category1: str, category2: str
) -> str:
    math1, math2 = profile1.mathematical, profile2.mathematical
    reasons: List[str] = []
    if math1["has_attractors"] and math2["has_attractors"]:
        reasons.append("Both explore mathematical attractors")
    if math1["has_fractals"] and math2["has_fractals"]:
        reasons.append("Both feature fractal mathematics")
    if abs(profile1.visual["organic_score"] - profile2.visual["organic_score"]) < 0.3:
        reasons.append("Similar organic aesthetic qualities")
    if (
        profile1.interaction["contemplative_score"] > 0.7
        and profile2.interaction["contemplative_score"] > 0.7
    ):
        reasons.append("Both offer contemplative experiences")
    if category1 and category1 == category2:
        reasons.append(f"Both belong to {category1} category")
    return "; ".join(reasons) if reasons else "Algorithmic similarity detected"


class SimilarityMatrix:
    """Sparse symmetric store keyed by unordered id pairs; self-pairs are rejected."""

    def __init__(self, values: Optional[Mapping[PairKey, float]] = None):
        self._values: Dict[PairKey, float] = {}
        for (id1, id2), value in (values or {}).items():
            self.set(id1, id2, value)

    @classmethod
    def from_dense(cls, ids: Sequence[str], dense: np.ndarray) -> "SimilarityMatrix":
        matrix = cls()
        for i in range(len(ids)):
            for j in range(i + 1, len(ids)):
                matrix._values[pair_key(ids[i], ids[j])] = float(dense[i, j])
        return matrix

    def get(self, id1: str, id2: str, default: float = 0.0) -> float:
        return self._values.get(pair_key(id1, id2), default)

    def set(self, id1: str, id2: str, value: float) -> None:
        if id1 == id2:
            raise ValueError(f"Self-similarity is not stored (got '{id1}' twice)")
        self._values[pair_key(id1, id2)] = float(np.clip(value, 0.0, 1.0))

    def items(self) -> Iterator[Tuple[PairKey, float]]:
        return iter(sorted(self._values.items()))

    def values(self) -> List[float]:
        return list(self._values.values())

    def mean(self) -> float:
        return float(np.mean(self.values())) if self._values else 0.0

    def __len__(self) -> int:
        return len(self._values)
