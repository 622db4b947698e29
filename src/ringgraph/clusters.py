"""
Cluster discovery over strong edges and synthesis of collection metadata.

Detection is a pure function of the current adjacency lists: every call returns
fresh clusters and fresh collection ids.
"""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .catalog import Project
from .graph import ConnectionGraph
from .profiles import FeatureProfile
from .schemas import Collection
from .similarity import SimilarityMatrix


@dataclass(frozen=True)
class Cluster:
    members: Tuple[str, ...]
    cohesion: float

    def __len__(self) -> int:
        return len(self.members)


def traverse_strong_edges(
    start: str,
    graph: ConnectionGraph,
    threshold: float,
    processed: Set[str],
) -> List[str]:
    """Depth-first walk from ``start`` over edges stronger than ``threshold``.

    Ids already in ``processed`` are not entered. Returns members in visit order.
    """

    visited: Set[str] = set()
    members: List[str] = []
    stack = [start]
    while stack:
        node = stack.pop()
        if node in visited or node in processed:
            continue
        visited.add(node)
        members.append(node)
        strong = [pid for pid, strength in graph.neighbors(node) if strength > threshold]
        stack.extend(reversed(strong))
    return members


def cohesion(members: Sequence[str], matrix: SimilarityMatrix) -> float:
    """Mean pairwise similarity; pairs without a stored value count as 0."""

    total = 0.0
    pairs = 0
    for i in range(len(members)):
        for j in range(i + 1, len(members)):
            total += matrix.get(members[i], members[j])
            pairs += 1
    return total / pairs if pairs else 0.0


def find_clusters(
    project_ids: Iterable[str],
    graph: ConnectionGraph,
    matrix: SimilarityMatrix,
    threshold: Optional[float] = None,
    min_size: Optional[int] = None,
) -> List[Cluster]:
    threshold = graph.config.cluster_threshold if threshold is None else threshold
    min_size = graph.config.min_cluster_size if min_size is None else min_size
    processed: Set[str] = set()
    clusters: List[Cluster] = []
    for project_id in project_ids:
        if project_id in processed:
            continue
        members = traverse_strong_edges(project_id, graph, threshold, processed)
        processed.update(members)
        if len(members) >= min_size:
            clusters.append(Cluster(members=tuple(members), cohesion=cohesion(members, matrix)))
    return clusters


def _display(category: str) -> str:
    category = category or "uncategorized"
    return category[:1].upper() + category[1:]


def describe_cluster(
    members: Sequence[str],
    projects: Mapping[str, Project],
    profiles: Mapping[str, FeatureProfile],
) -> Tuple[str, str]:
    known = [pid for pid in members if pid in projects]
    if not known:
        return "Explorations", "A generated selection of related projects"
    categories = Counter(projects[pid].category for pid in known)
    dominant = categories.most_common(1)[0][0]
    scored = [profiles[pid] for pid in known if pid in profiles]
    size = len(known)
    contemplative = sum(p.interaction["contemplative_score"] > 0.7 for p in scored) / size
    interactive = sum(p.interaction["engagement_level"] > 0.7 for p in scored) / size
    avg_complexity = sum(p.complexity for p in scored) / size
    label = _display(dominant)
    if contemplative > 0.6:
        return f"Contemplative {label}", "A collection of meditative and contemplative experiences"
    if interactive > 0.6:
        return f"Interactive {label}", "A collection of highly interactive and engaging experiences"
    if avg_complexity > 0.7:
        return f"Complex {label}", "A collection of mathematically and technically sophisticated works"
    return f"{label} Explorations", f"A curated selection of {dominant or 'uncategorized'}-focused projects"


def _collection_id(now: datetime) -> str:
    return f"dynamic_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


def collection_from_members(
    members: Sequence[str],
    projects: Mapping[str, Project],
    profiles: Mapping[str, FeatureProfile],
    matrix: SimilarityMatrix,
    cohesion_score: Optional[float] = None,
) -> Collection:
    title, description = describe_cluster(members, projects, profiles)
    now = datetime.now(timezone.utc)
    return Collection(
        id=_collection_id(now),
        title=title,
        description=description,
        projects=list(members),
        curated=False,
        featured=False,
        auto_generated=True,
        cluster_size=len(members),
        cohesion_score=cohesion(members, matrix) if cohesion_score is None else cohesion_score,
        generated_at=now.isoformat(),
    )
