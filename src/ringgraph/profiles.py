from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .catalog import Project
from .heuristics import DOMAINS, JitterSource, clamp

AttributeValue = Union[bool, float]

FEATURE_GROUPS: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
    (domain, module.ATTRIBUTES) for domain, module in DOMAINS.items()
)
FEATURE_NAMES: Tuple[str, ...] = tuple(
    f"{domain}.{attr}" for domain, attrs in FEATURE_GROUPS for attr in attrs
)
FEATURE_VECTOR_SIZE = len(FEATURE_NAMES)

MATH_FLAGS = ("has_attractors", "has_fractals", "has_particles", "has_growth")


@dataclass(frozen=True)
class FeatureProfile:
    project_id: str
    mathematical: Mapping[str, AttributeValue]
    visual: Mapping[str, AttributeValue]
    technical: Mapping[str, AttributeValue]
    interaction: Mapping[str, AttributeValue]
    complexity: float
    tags: Tuple[str, ...]

    def group(self, domain: str) -> Mapping[str, AttributeValue]:
        return getattr(self, domain)

    @property
    def vector(self) -> np.ndarray:
        values = [
            float(self.group(domain)[attr]) for domain, attrs in FEATURE_GROUPS for attr in attrs
        ]
        return np.asarray(values, dtype=float)

    def true_flags(self) -> List[str]:
        return [flag for flag in MATH_FLAGS if self.mathematical.get(flag)]


def attribute_for_index(index: int) -> Tuple[str, str]:
    """Map a vector position back to ``(domain, attribute)``."""

    domain, attr = FEATURE_NAMES[index].split(".", 1)
    return domain, attr


def calculate_complexity(project: Project) -> float:
    tech = project.technical_details
    exp = project.experience
    score = 0.0
    if "O(n²)" in tech.complexity:
        score += 0.6
    elif "O(n log n)" in tech.complexity:
        score += 0.4
    elif "O(n)" in tech.complexity:
        score += 0.2
    if exp.interaction_level == "high":
        score += 0.3
    elif exp.interaction_level == "medium":
        score += 0.2
    if exp.audio_reactive:
        score += 0.2
    if exp.vr_compatible:
        score += 0.3
    if tech.scientific_accuracy:
        score += 0.2
    return clamp(score)


def generate_tags(project: Project) -> Tuple[str, ...]:
    exp = project.experience
    candidates = [
        project.category,
        project.type,
        "contemplative" if exp.contemplative else "",
        "audio-reactive" if exp.audio_reactive else "",
        "educational" if exp.educational else "",
        "therapeutic" if exp.therapeutic else "",
        "vr-compatible" if exp.vr_compatible else "",
        "computationally-intensive" if "O(n²)" in project.technical_details.complexity else "",
        "interactive" if exp.interaction_level == "high" else "",
    ]
    return tuple(dict.fromkeys(tag for tag in candidates if tag))


def build_profile(project: Project, rng: JitterSource) -> FeatureProfile:
    groups = {domain: module.extract(project, rng) for domain, module in DOMAINS.items()}
    return FeatureProfile(
        project_id=project.id,
        complexity=calculate_complexity(project),
        tags=generate_tags(project),
        **groups,
    )


def build_profiles(projects: Iterable[Project], rng: JitterSource) -> Dict[str, FeatureProfile]:
    return {project.id: build_profile(project, rng) for project in projects}


def profile_matrix(profiles: Mapping[str, FeatureProfile], ids: Sequence[str]) -> np.ndarray:
    if not ids:
        return np.zeros((0, FEATURE_VECTOR_SIZE))
    return np.vstack([profiles[pid].vector for pid in ids])


def feature_frame(projects: Sequence[Project], profiles: Mapping[str, FeatureProfile]) -> pd.DataFrame:
    """One row per project: identity columns, complexity, flags, tags and the 64 attributes."""

    rows = []
    for project in projects:
        profile = profiles[project.id]
        row = {
            "project_id": project.id,
            "title": project.title,
            "category": project.category,
            "type": project.type,
            "complexity": profile.complexity,
            "mathematical_flags": ";".join(profile.true_flags()),
            "tags": ";".join(profile.tags),
        }
        row.update(zip(FEATURE_NAMES, profile.vector.round(4)))
        rows.append(row)
    columns = ["project_id", "title", "category", "type", "complexity", "mathematical_flags", "tags"]
    return pd.DataFrame(rows, columns=columns + list(FEATURE_NAMES))
