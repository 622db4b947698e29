"""Heuristic estimators for the experience a project offers its audience."""

from __future__ import annotations

from typing import Dict, Tuple

from ..catalog import Project
from ._common import JitterSource, clamp, spread

ATTRIBUTES: Tuple[str, ...] = (
    "engagement_level",
    "contemplative_score",
    "responsiveness",
    "feedback_quality",
    "learning_curve",
    "accessibility_score",
    "collaborative_level",
    "personalizable",
    "replayability",
    "exploration_depth",
    "intuitiveness",
    "emotional_connection",
    "cognitive_load",
    "flow_state",
    "social_aspects",
    "therapeutic_value",
)

_COMPARED = (
    "engagement_level",
    "contemplative_score",
    "responsiveness",
    "emotional_connection",
    "therapeutic_value",
    "flow_state",
)
SIMILARITY_WEIGHTS: Dict[str, float] = {name: 1.0 / len(_COMPARED) for name in _COMPARED}


def extract(project: Project, rng: JitterSource) -> Dict[str, float]:
    exp = project.experience
    kind = project.type
    category = project.category
    level = exp.interaction_level
    realtime = kind == "real_time_interactive"
    param_count = project.parameter_count

    if level == "high":
        engagement = spread(rng, 0.8, 0.2)
    elif level == "medium":
        engagement = spread(rng, 0.5, 0.3)
    else:
        engagement = spread(rng, 0.2, 0.4)

    if exp.contemplative:
        contemplative = spread(rng, 0.7, 0.3)
    elif exp.meditative:
        contemplative = spread(rng, 0.8, 0.2)
    elif category == "emotional":
        contemplative = spread(rng, 0.6, 0.3)
    else:
        contemplative = spread(rng, 0.2, 0.4)

    if realtime:
        responsiveness = spread(rng, 0.8, 0.2)
    elif "60 FPS" in project.technical_details.frame_rate:
        responsiveness = 0.9
    elif exp.audio_reactive:
        responsiveness = spread(rng, 0.7, 0.2)
    else:
        responsiveness = spread(rng, 0.3, 0.4)

    feedback = 0.4 + (0.2 if exp.audio_reactive else 0.0) + (0.2 if realtime else 0.0)
    if exp.biofeedback:
        feedback += 0.3

    # Lower means easier to pick up.
    learning = 0.5
    if level == "high":
        learning += 0.3
    if param_count > 5:
        learning += 0.2
    if exp.educational:
        learning += 0.1
    learning = clamp(learning)

    if exp.collaborative:
        collaborative = spread(rng, 0.8, 0.2)
    elif realtime:
        collaborative = spread(rng, 0.3, 0.4)
    else:
        collaborative = spread(rng, 0.1, 0.3)

    if param_count > 6:
        personalizable = spread(rng, 0.8, 0.2)
    elif param_count > 3:
        personalizable = spread(rng, 0.5, 0.3)
    else:
        personalizable = spread(rng, 0.2, 0.4)

    replayability = 0.4 + (0.3 if realtime else 0.0) + (0.2 if personalizable > 0.6 else 0.0)
    if exp.duration == "Open-ended":
        replayability += 0.3

    depth = 0.4 + (0.3 if exp.educational else 0.0) + (0.2 if personalizable > 0.7 else 0.0)
    if "3D navigation" in project.technical_details.interactivity:
        depth += 0.2

    intuitiveness = 0.6
    if learning > 0.7:
        intuitiveness -= 0.3
    if level == "high":
        intuitiveness -= 0.1
    if category == "emotional":
        intuitiveness += 0.2

    if category == "emotional":
        emotional = spread(rng, 0.8, 0.2)
    elif exp.therapeutic:
        emotional = spread(rng, 0.7, 0.3)
    elif exp.contemplative:
        emotional = spread(rng, 0.6, 0.3)
    else:
        emotional = spread(rng, 0.3, 0.4)

    load = 0.4 + (0.2 if exp.educational else 0.0) + (0.3 if learning > 0.7 else 0.0)
    if level == "high":
        load += 0.2

    flow = 0.4 + (0.3 if exp.contemplative else 0.0)
    if engagement > 0.7:
        flow += 0.2
    if responsiveness > 0.7:
        flow += 0.2

    if exp.collaborative:
        social = spread(rng, 0.7, 0.3)
    elif realtime:
        social = spread(rng, 0.3, 0.4)
    else:
        social = spread(rng, 0.1, 0.3)

    if exp.therapeutic:
        therapeutic = spread(rng, 0.8, 0.2)
    elif exp.contemplative:
        therapeutic = spread(rng, 0.6, 0.3)
    elif category == "emotional":
        therapeutic = spread(rng, 0.5, 0.4)
    else:
        therapeutic = spread(rng, 0.2, 0.3)

    return {
        "engagement_level": engagement,
        "contemplative_score": contemplative,
        "responsiveness": responsiveness,
        "feedback_quality": clamp(feedback),
        "learning_curve": learning,
        # No catalog field describes accessibility yet; estimated around the middle.
        "accessibility_score": spread(rng, 0.5, 0.3),
        "collaborative_level": collaborative,
        "personalizable": personalizable,
        "replayability": clamp(replayability),
        "exploration_depth": clamp(depth),
        "intuitiveness": clamp(intuitiveness, 0.1),
        "emotional_connection": emotional,
        "cognitive_load": clamp(load),
        "flow_state": clamp(flow),
        "social_aspects": social,
        "therapeutic_value": therapeutic,
    }
