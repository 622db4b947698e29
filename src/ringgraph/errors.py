"""Exceptions raised by the connection engine.

All of them are local to a single call; the engine's in-memory state is left
untouched when one is raised.
"""

from __future__ import annotations

from typing import Sequence


class RingGraphError(Exception):
    """Base class for engine errors."""


class NotFound(RingGraphError, KeyError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project '{project_id}' not found")

    def __str__(self) -> str:
        return self.args[0]


class UnsupportedFormat(RingGraphError, ValueError):
    def __init__(self, fmt: str, supported: Sequence[str]):
        self.format = fmt
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported export format: {fmt!r} (supported: {', '.join(self.supported)})"
        )


class InvalidSignal(RingGraphError, ValueError):
    def __init__(self, signal: object, valid: Sequence[str]):
        self.signal = signal
        self.valid = tuple(valid)
        super().__init__(f"Invalid feedback signal {signal!r}; expected one of {', '.join(self.valid)}")
