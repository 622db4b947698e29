from __future__ import annotations

from typing import Protocol, Sequence

from ..catalog import Project


class JitterSource(Protocol):
    """Anything exposing ``random() -> float`` in [0, 1), e.g. ``numpy.random.Generator``."""

    def random(self) -> float: ...


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return float(min(high, max(low, value)))


def spread(rng: JitterSource, low: float, width: float) -> float:
    """Uniform draw in ``[low, low + width)``, clamped to [0, 1]."""

    return clamp(low + float(rng.random()) * width)


def mentions(project: Project, keywords: Sequence[str]) -> bool:
    identifier = project.id.lower()
    description = project.description.lower()
    return any(k in identifier or k in description for k in keywords)

