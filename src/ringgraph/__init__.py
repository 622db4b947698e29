"""
Connection engine for the Binary Ring project catalog.

The package provides utilities for:
    * deriving 64-dimensional feature profiles from catalog records,
    * scoring project pairs and keeping a capped, ranked connection graph,
    * discovering clusters of closely related projects and naming them,
    * learning from relevance feedback and an optional autoencoder embedding,
    * exporting the network as JSON, GraphML, DOT or CSV plus analytics.

Everything runs in-process against a catalog JSON file; no server or
database is required.
"""

from .config import EngineConfig, GraphConfig, PipelinePaths
from .engine import ConnectionEngine
from .errors import InvalidSignal, NotFound, RingGraphError, UnsupportedFormat
from .pipeline import run_pipeline

__all__ = [
    "ConnectionEngine",
    "EngineConfig",
    "GraphConfig",
    "InvalidSignal",
    "NotFound",
    "PipelinePaths",
    "RingGraphError",
    "UnsupportedFormat",
    "run_pipeline",
]
