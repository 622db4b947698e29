"""Heuristic estimators for the mathematical character of a project."""

from __future__ import annotations

from typing import Dict, Tuple, Union

from ..catalog import Project
from ._common import JitterSource, clamp, mentions, spread

ATTRIBUTES: Tuple[str, ...] = (
    "has_attractors",
    "has_fractals",
    "has_particles",
    "has_growth",
    "complexity_score",
    "chaos_level",
    "symmetry_score",
    "recursion_level",
    "dimensionality",
    "algorithmic_entropy",
    "geometric_complexity",
    "temporal_dynamics",
    "spatial_complexity",
    "emergence_level",
    "self_similarity",
    "nonlinearity",
)

SIMILARITY_WEIGHTS: Dict[str, float] = {
    "has_attractors": 0.15,
    "has_fractals": 0.15,
    "has_particles": 0.10,
    "has_growth": 0.10,
    "complexity_score": 0.20,
    "chaos_level": 0.10,
    "symmetry_score": 0.05,
    "recursion_level": 0.05,
    "dimensionality": 0.10,
}

ATTRACTOR_KEYWORDS = ("lorenz", "attractor", "strange", "henon", "jong")
FRACTAL_KEYWORDS = ("fractal", "buddhabrot", "mandelbrot", "julia", "sierpinski")
PARTICLE_KEYWORDS = ("particle", "swarm", "orbital", "node")
GROWTH_KEYWORDS = ("growth", "substrate", "crack", "organic", "evolution")
CHAOS_KEYWORDS = ("lorenz", "strange", "chaotic", "sensitive", "butterfly")

DOUBLE_PRECISION = "Double-precision floating point"


def has_attractors(project: Project) -> bool:
    return project.category == "attractors" or mentions(project, ATTRACTOR_KEYWORDS)


def has_fractals(project: Project) -> bool:
    return project.category == "fractals" or mentions(project, FRACTAL_KEYWORDS)


def has_particles(project: Project) -> bool:
    return project.category == "particles" or mentions(project, PARTICLE_KEYWORDS)


def has_growth(project: Project) -> bool:
    return project.type == "growth_simulation" or mentions(project, GROWTH_KEYWORDS)


def _complexity_score(project: Project, attractors: bool, fractals: bool) -> float:
    tech = project.technical_details
    score = 0.0
    if "Runge-Kutta" in tech.algorithm:
        score += 0.8
    if "Monte Carlo" in tech.algorithm:
        score += 0.7
    if "integration" in tech.algorithm:
        score += 0.6
    if "O(n²)" in tech.complexity:
        score += 0.6
    if tech.precision == DOUBLE_PRECISION:
        score += 0.3
    if attractors:
        score += 0.5
    if fractals:
        score += 0.6
    if project.category == "attractors":
        score += 0.4
    return clamp(score)


def _dimensionality(project: Project, rng: JitterSource) -> float:
    if "3D" in project.technical_details.algorithm:
        return 0.8
    if project.experience.vr_compatible:
        return 0.9
    if "3D models" in project.outputs.formats:
        return 0.7
    return spread(rng, 0.4, 0.3)


def extract(project: Project, rng: JitterSource) -> Dict[str, Union[bool, float]]:
    attractors = has_attractors(project)
    fractals = has_fractals(project)
    growth_sim = project.type == "growth_simulation"
    category = project.category

    chaotic = any(k in project.description.lower() for k in CHAOS_KEYWORDS)
    chaos = spread(rng, 0.7, 0.3) if chaotic else spread(rng, 0.0, 0.3)

    if category == "fractals":
        symmetry = spread(rng, 0.6, 0.3)
    elif category == "geometric":
        symmetry = spread(rng, 0.5, 0.4)
    else:
        symmetry = spread(rng, 0.0, 0.6)

    if fractals:
        recursion = spread(rng, 0.7, 0.3)
    elif growth_sim:
        recursion = spread(rng, 0.4, 0.4)
    else:
        recursion = spread(rng, 0.0, 0.4)

    dimensionality = _dimensionality(project, rng)

    entropy = 0.5
    if chaos > 0.6:
        entropy += 0.3
    if project.parameter_count > 5:
        entropy += 0.2
    if "Monte Carlo" in project.technical_details.complexity:
        entropy += 0.2
    entropy = clamp(entropy + float(rng.random()) * 0.2 - 0.1)

    if category == "geometric":
        geometric = spread(rng, 0.6, 0.3)
    elif category == "fractals":
        geometric = spread(rng, 0.5, 0.4)
    elif category == "networks":
        geometric = spread(rng, 0.4, 0.4)
    else:
        geometric = spread(rng, 0.0, 0.6)

    if project.type == "real_time_interactive":
        temporal = spread(rng, 0.7, 0.3)
    elif project.experience.audio_reactive:
        temporal = spread(rng, 0.6, 0.3)
    elif project.type == "static_generative":
        temporal = spread(rng, 0.0, 0.4)
    else:
        temporal = spread(rng, 0.2, 0.6)

    if dimensionality > 0.7:
        spatial = spread(rng, 0.6, 0.3)
    elif category == "networks":
        spatial = spread(rng, 0.5, 0.3)
    else:
        spatial = spread(rng, 0.0, 0.7)

    if category == "networks":
        emergence = spread(rng, 0.5, 0.4)
    elif growth_sim:
        emergence = spread(rng, 0.6, 0.3)
    elif "emergent" in project.long_description:
        emergence = spread(rng, 0.7, 0.3)
    else:
        emergence = spread(rng, 0.0, 0.5)

    if fractals:
        self_similarity = spread(rng, 0.7, 0.3)
    elif recursion > 0.6:
        self_similarity = spread(rng, 0.5, 0.4)
    else:
        self_similarity = spread(rng, 0.0, 0.4)

    if chaos > 0.6:
        nonlinearity = spread(rng, 0.7, 0.3)
    elif attractors:
        nonlinearity = spread(rng, 0.6, 0.4)
    else:
        nonlinearity = spread(rng, 0.0, 0.6)

    return {
        "has_attractors": attractors,
        "has_fractals": fractals,
        "has_particles": has_particles(project),
        "has_growth": has_growth(project),
        "complexity_score": _complexity_score(project, attractors, fractals),
        "chaos_level": chaos,
        "symmetry_score": symmetry,
        "recursion_level": recursion,
        "dimensionality": dimensionality,
        "algorithmic_entropy": entropy,
        "geometric_complexity": geometric,
        "temporal_dynamics": temporal,
        "spatial_complexity": spatial,
        "emergence_level": emergence,
        "self_similarity": self_similarity,
        "nonlinearity": nonlinearity,
    }
