"""Heuristic estimators for implementation and runtime characteristics."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from ..catalog import Project
from ._common import JitterSource, clamp, spread

ATTRIBUTES: Tuple[str, ...] = (
    "algorithm_complexity",
    "computational_intensity",
    "interactivity_level",
    "performance_score",
    "code_complexity",
    "rendering_complexity",
    "memory_usage",
    "optimization_level",
    "scalability_score",
    "maintainability_score",
    "modularity",
    "testability",
    "reliability",
    "efficiency",
    "robustness",
    "extensibility",
)

_COMPARED = ATTRIBUTES[:6]
SIMILARITY_WEIGHTS: Dict[str, float] = {name: 1.0 / len(_COMPARED) for name in _COMPARED}

DOUBLE_PRECISION = "Double-precision floating point"
LARGE_SAMPLE_COUNT = 10_000_000


def complexity_class_score(complexity: str) -> float:
    """Map a declared big-O string onto [0, 1]; 0 when nothing is recognised."""

    if "O(n²)" in complexity or "O(n^2)" in complexity:
        return 0.8
    if "O(n log n)" in complexity:
        return 0.6
    if "O(n)" in complexity:
        return 0.4
    return 0.0


def _max_samples(parameters: Dict[str, Any]) -> float:
    samples = parameters.get("samples")
    if not isinstance(samples, dict):
        return 0.0
    try:
        return float(samples.get("max") or 0)
    except (TypeError, ValueError):
        return 0.0


def extract(project: Project, rng: JitterSource) -> Dict[str, float]:
    tech = project.technical_details
    exp = project.experience
    outputs = project.outputs
    level = exp.interaction_level
    eight_k = "8K" in outputs.max_resolution
    many_params = project.parameter_count > 4

    algorithm = complexity_class_score(tech.complexity) or spread(rng, 0.2, 0.4)

    intensity = 0.3
    if "Monte Carlo" in tech.algorithm:
        intensity += 0.4
    if "Runge-Kutta" in tech.algorithm:
        intensity += 0.3
    if eight_k:
        intensity += 0.3
    if tech.precision == DOUBLE_PRECISION:
        intensity += 0.2

    if level == "high":
        interactivity = spread(rng, 0.8, 0.2)
    elif level == "medium":
        interactivity = spread(rng, 0.5, 0.3)
    elif level == "low":
        interactivity = spread(rng, 0.1, 0.3)
    else:
        interactivity = spread(rng, 0.3, 0.4)

    performance = 0.5
    if "60 FPS" in tech.frame_rate:
        performance += 0.3
    if "Real-time" in tech.render_time:
        performance += 0.2
    if "4K" in outputs.max_resolution:
        performance += 0.1
    if "2-30 seconds" in tech.render_time:
        performance -= 0.1
    performance = clamp(performance, 0.1)

    code = 0.4
    if tech.scientific_accuracy:
        code += 0.2
    if exp.audio_reactive:
        code += 0.2
    if exp.vr_compatible:
        code += 0.2
    if exp.biofeedback:
        code += 0.3
    code = clamp(code)

    rendering = 0.3
    if "WebM" in outputs.formats:
        rendering += 0.2
    if "3D models" in outputs.formats:
        rendering += 0.3
    if eight_k:
        rendering += 0.3
    if exp.vr_compatible:
        rendering += 0.2

    memory = 0.4
    if eight_k:
        memory += 0.4
    if "300 nodes" in tech.frame_rate:
        memory += 0.2
    if _max_samples(project.parameters) > LARGE_SAMPLE_COUNT:
        memory += 0.3

    optimization = 0.5
    if "spatial hashing" in tech.complexity:
        optimization += 0.3
    if "60 FPS" in tech.frame_rate:
        optimization += 0.2
    if "Real-time" in tech.render_time:
        optimization += 0.2
    optimization = clamp(optimization)

    scalability = 0.4 + (0.3 if many_params else 0.0) + (0.2 if eight_k else 0.0)
    if level == "high":
        scalability += 0.2

    modularity = 0.5 + (0.2 if code > 0.7 else 0.0)
    modularity = clamp(modularity + float(rng.random()) * 0.3)

    testability = 0.6
    if level == "high":
        testability -= 0.2
    if code > 0.8:
        testability -= 0.1

    reliability = 0.4 + performance * 0.4

    robustness = 0.5
    if tech.precision == DOUBLE_PRECISION:
        robustness += 0.2
    if reliability > 0.7:
        robustness += 0.2

    extensibility = 0.5 + (0.2 if many_params else 0.0) + (0.2 if level == "high" else 0.0)

    return {
        "algorithm_complexity": algorithm,
        "computational_intensity": clamp(intensity),
        "interactivity_level": interactivity,
        "performance_score": performance,
        "code_complexity": code,
        "rendering_complexity": clamp(rendering),
        "memory_usage": clamp(memory),
        "optimization_level": optimization,
        "scalability_score": clamp(scalability),
        "maintainability_score": spread(rng, 0.4, 0.4),
        "modularity": modularity,
        "testability": clamp(testability, 0.1),
        "reliability": clamp(reliability),
        "efficiency": clamp(performance * 0.6 + optimization * 0.4),
        "robustness": clamp(robustness),
        "extensibility": clamp(extensibility),
    }
