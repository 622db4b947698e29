from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Optional, Union

from .config import FeedbackConfig
from .errors import InvalidSignal
from .graph import ConnectionGraph
from .heuristics import clamp
from .similarity import SimilarityMatrix

LOGGER = logging.getLogger(__name__)


class FeedbackSignal(str, Enum):
    RELEVANT = "relevant"
    NOT_RELEVANT = "not_relevant"
    VERY_RELEVANT = "very_relevant"


VALID_SIGNALS = tuple(s.value for s in FeedbackSignal)


def parse_signal(signal: Union[str, FeedbackSignal]) -> FeedbackSignal:
    if isinstance(signal, FeedbackSignal):
        return signal
    try:
        return FeedbackSignal(str(signal).strip().lower())
    except ValueError:
        raise InvalidSignal(signal, VALID_SIGNALS) from None


def adjusted_similarity(current: float, signal: FeedbackSignal, config: FeedbackConfig) -> float:
    """Positive signals move toward 1 proportionally to the gap, negative toward 0."""

    multiplier = config.multipliers[signal.value]
    step = config.learning_rate * abs(multiplier)
    if multiplier >= 0:
        adjustment = step * (1 - current)
    else:
        adjustment = -step * current
    return clamp(current + adjustment)


class FeedbackLearner:
    """Applies bounded online updates to one pair at a time.

    The matrix write and both adjacency repairs happen under ``lock`` so readers
    holding the same lock never see one without the other.
    """

    def __init__(
        self,
        matrix: SimilarityMatrix,
        graph: ConnectionGraph,
        config: Optional[FeedbackConfig] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self.matrix = matrix
        self.graph = graph
        self.config = config or FeedbackConfig()
        self.lock = lock or threading.RLock()

    def apply(self, id1: str, id2: str, signal: Union[str, FeedbackSignal]) -> float:
        parsed = parse_signal(signal)
        if id1 == id2:
            raise ValueError("Feedback needs two different projects")
        with self.lock:
            current = self.matrix.get(id1, id2)
            updated = adjusted_similarity(current, parsed, self.config)
            self.matrix.set(id1, id2, updated)
            self.graph.patch(id1, id2, updated)
        LOGGER.debug("Feedback %s on %s/%s: %.4f -> %.4f", parsed.value, id1, id2, current, updated)
        return updated
