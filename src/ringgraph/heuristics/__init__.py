"""
Per-domain heuristic estimators.

Each module exposes ``ATTRIBUTES`` (the canonical order of its 16 attributes),
``SIMILARITY_WEIGHTS`` (attribute -> weight used when comparing two profiles)
and ``extract(project, rng)``. Estimators look at one project only and never
raise for missing catalog fields.
"""

from . import interaction, mathematical, technical, visual
from ._common import JitterSource, clamp

DOMAINS = {
    "mathematical": mathematical,
    "visual": visual,
    "technical": technical,
    "interaction": interaction,
}

__all__ = ["DOMAINS", "JitterSource", "clamp", "interaction", "mathematical", "technical", "visual"]
