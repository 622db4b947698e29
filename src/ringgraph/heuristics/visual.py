"""Heuristic estimators for visual and aesthetic qualities."""

from __future__ import annotations

from typing import Dict, Tuple

from ..catalog import Project
from ._common import JitterSource, clamp, spread

ATTRIBUTES: Tuple[str, ...] = (
    "color_complexity",
    "motion_intensity",
    "organic_score",
    "geometric_score",
    "contrast_level",
    "texture_complexity",
    "rhythm_score",
    "balance_score",
    "energy_level",
    "harmony_score",
    "luminance_variance",
    "spatial_frequency",
    "temporal_coherence",
    "visual_entropy",
    "aesthetic_complexity",
    "emotional_resonance",
)

_COMPARED = ATTRIBUTES[:10]
SIMILARITY_WEIGHTS: Dict[str, float] = {name: 1.0 / len(_COMPARED) for name in _COMPARED}

ORGANIC_KEYWORDS = ("organic", "growth", "biological", "natural", "flow")
GEOMETRIC_KEYWORDS = ("geometric", "fractal", "mathematical", "precise")


def _color_complexity(project: Project, rng: JitterSource) -> float:
    modes = project.outputs.color_modes
    if not modes:
        return spread(rng, 0.0, 0.7)
    if len(modes) >= 4:
        return spread(rng, 0.8, 0.2)
    if len(modes) >= 3:
        return spread(rng, 0.6, 0.3)
    return spread(rng, 0.3, 0.4)


def extract(project: Project, rng: JitterSource) -> Dict[str, float]:
    category = project.category
    kind = project.type
    exp = project.experience
    modes = project.outputs.color_modes
    description = project.description.lower()

    color = _color_complexity(project, rng)

    if kind == "real_time_interactive":
        motion = spread(rng, 0.7, 0.3)
    elif exp.audio_reactive:
        motion = spread(rng, 0.6, 0.3)
    elif kind == "static_generative":
        motion = spread(rng, 0.1, 0.2)
    else:
        motion = spread(rng, 0.3, 0.4)

    is_organic = category == "organic" or any(k in description for k in ORGANIC_KEYWORDS)
    organic = spread(rng, 0.6, 0.4) if is_organic else spread(rng, 0.0, 0.5)

    is_geometric = category in ("fractals", "geometric") or any(
        k in description for k in GEOMETRIC_KEYWORDS
    )
    geometric = spread(rng, 0.6, 0.4) if is_geometric else spread(rng, 0.0, 0.5)

    if "monochrome" in modes:
        contrast = spread(rng, 0.8, 0.2)
    elif category == "emotional":
        contrast = spread(rng, 0.4, 0.3)
    else:
        contrast = spread(rng, 0.3, 0.5)

    if category == "organic":
        texture = spread(rng, 0.6, 0.4)
    elif kind == "growth_simulation":
        texture = spread(rng, 0.7, 0.3)
    elif category == "fractals":
        texture = spread(rng, 0.5, 0.4)
    else:
        texture = spread(rng, 0.0, 0.6)

    if exp.audio_reactive:
        rhythm = spread(rng, 0.7, 0.3)
    elif kind == "real_time_interactive":
        rhythm = spread(rng, 0.5, 0.3)
    else:
        rhythm = spread(rng, 0.0, 0.5)

    if category == "emotional":
        balance = spread(rng, 0.6, 0.4)
    elif exp.contemplative:
        balance = spread(rng, 0.7, 0.3)
    else:
        balance = spread(rng, 0.4, 0.4)

    if category == "emotional" and "happy" in project.id.lower():
        energy = spread(rng, 0.8, 0.2)
    elif kind == "real_time_interactive":
        energy = spread(rng, 0.6, 0.3)
    elif exp.contemplative:
        energy = spread(rng, 0.2, 0.3)
    else:
        energy = spread(rng, 0.3, 0.5)

    if exp.contemplative:
        harmony = spread(rng, 0.7, 0.3)
    elif category == "emotional":
        harmony = spread(rng, 0.6, 0.3)
    else:
        harmony = spread(rng, 0.4, 0.4)

    if "monochrome" in modes:
        luminance = spread(rng, 0.3, 0.3)
    elif "vibrant" in modes:
        luminance = spread(rng, 0.7, 0.3)
    else:
        luminance = spread(rng, 0.0, 0.7)

    if category == "fractals":
        frequency = spread(rng, 0.8, 0.2)
    elif category == "networks":
        frequency = spread(rng, 0.6, 0.3)
    else:
        frequency = spread(rng, 0.3, 0.5)

    if kind == "static_generative":
        coherence = spread(rng, 0.9, 0.1)
    elif exp.contemplative:
        coherence = spread(rng, 0.7, 0.2)
    else:
        coherence = spread(rng, 0.4, 0.4)

    if category == "organic":
        entropy = spread(rng, 0.6, 0.3)
    elif kind == "growth_simulation":
        entropy = spread(rng, 0.7, 0.3)
    else:
        entropy = spread(rng, 0.3, 0.5)

    aesthetic = 0.3 + 0.2 * sum(v > 0.7 for v in (organic, geometric, color, texture))
    aesthetic = clamp(aesthetic + float(rng.random()) * 0.2)

    if category == "emotional":
        resonance = spread(rng, 0.8, 0.2)
    elif exp.therapeutic:
        resonance = spread(rng, 0.7, 0.3)
    elif exp.contemplative:
        resonance = spread(rng, 0.6, 0.3)
    else:
        resonance = spread(rng, 0.3, 0.4)

    return {
        "color_complexity": color,
        "motion_intensity": motion,
        "organic_score": organic,
        "geometric_score": geometric,
        "contrast_level": contrast,
        "texture_complexity": texture,
        "rhythm_score": rhythm,
        "balance_score": balance,
        "energy_level": energy,
        "harmony_score": harmony,
        "luminance_variance": luminance,
        "spatial_frequency": frequency,
        "temporal_coherence": coherence,
        "visual_entropy": entropy,
        "aesthetic_complexity": aesthetic,
        "emotional_resonance": resonance,
    }
