from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .config import GraphConfig
from .similarity import SimilarityMatrix

Edge = Tuple[str, float]


class ConnectionGraph:
    """Thresholded, capped, ranked adjacency lists derived from a similarity matrix.

    Neighbors are ordered by strength descending, ties broken by neighbor id so
    the ordering does not depend on how the matrix was filled.
    """

    def __init__(self, config: GraphConfig | None = None):
        self.config = config or GraphConfig()
        self._adjacency: Dict[str, List[Edge]] = {}

    @classmethod
    def from_matrix(cls, matrix: SimilarityMatrix, config: GraphConfig | None = None) -> "ConnectionGraph":
        graph = cls(config)
        graph.rebuild(matrix)
        return graph

    def _rank(self, edges: Iterable[Edge]) -> List[Edge]:
        ordered = sorted(edges, key=lambda edge: (-edge[1], edge[0]))
        return ordered[: self.config.max_connections]

    def rebuild(self, matrix: SimilarityMatrix) -> None:
        threshold = self.config.min_similarity_threshold
        adjacency: Dict[str, List[Edge]] = {}
        for (id1, id2), strength in matrix.items():
            if strength >= threshold:
                adjacency.setdefault(id1, []).append((id2, strength))
                adjacency.setdefault(id2, []).append((id1, strength))
        self._adjacency = {pid: self._rank(edges) for pid, edges in adjacency.items()}

    def _patch_one(self, source: str, target: str, strength: float) -> None:
        edges = list(self._adjacency.get(source, []))
        positions = [i for i, (pid, _) in enumerate(edges) if pid == target]
        if positions:
            edges[positions[0]] = (target, strength)
        elif strength >= self.config.min_similarity_threshold:
            edges.append((target, strength))
        edges = [e for e in edges if e[1] >= self.config.min_similarity_threshold]
        ranked = self._rank(edges)
        if ranked:
            self._adjacency[source] = ranked
        else:
            self._adjacency.pop(source, None)

    def patch(self, id1: str, id2: str, strength: float) -> None:
        """Repair both adjacency lists after a single pair changed, without a rebuild."""

        self._patch_one(id1, id2, strength)
        self._patch_one(id2, id1, strength)

    def neighbors(self, project_id: str) -> List[Edge]:
        return list(self._adjacency.get(project_id, []))

    def related(self, project_id: str, limit: int = 5) -> List[Edge]:
        return self.neighbors(project_id)[: max(0, limit)]

    def degree(self, project_id: str) -> int:
        return len(self._adjacency.get(project_id, []))

    def edges(self) -> List[Tuple[str, str, float]]:
        """Undirected edge list: each pair present in either adjacency list, once."""

        seen: Dict[Tuple[str, str], float] = {}
        for source, neighbors in self._adjacency.items():
            for target, strength in neighbors:
                key = (source, target) if source < target else (target, source)
                seen.setdefault(key, strength)
        return [(a, b, w) for (a, b), w in sorted(seen.items())]

    def __contains__(self, project_id: str) -> bool:
        return project_id in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)
