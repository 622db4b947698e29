"""Result models handed back to collaborators (CLI, HTTP layers, notebooks)."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RelatedProject(BaseModel):
    id: str
    similarity: float = Field(..., description="Connection strength in [0, 1]", ge=0, le=1)
    reason: str = Field(..., description="Human readable explanation of the connection")
    title: Optional[str] = None
    category: Optional[str] = None


class SimilarityResult(BaseModel):
    project1: str
    project2: str
    score: float = Field(..., description="Freshly computed similarity", ge=0, le=1)
    stored: float = Field(..., description="Matrix value including feedback adjustments", ge=0, le=1)
    explanation: str
    strength: str = Field(..., description="strong, moderate or weak")
    domains: Dict[str, float] = Field(default_factory=dict, description="Per-domain similarity")


class Collection(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    description: str = ""
    projects: List[str] = Field(default_factory=list)
    curated: bool = False
    featured: bool = False
    auto_generated: bool = False
    cluster_size: Optional[int] = None
    cohesion_score: Optional[float] = None
    generated_at: Optional[str] = None


class MostConnected(BaseModel):
    project_id: Optional[str] = None
    title: Optional[str] = None
    connection_count: int = 0


class ComplexityStats(BaseModel):
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0
    median: float = 0.0


class EmbeddingStatus(BaseModel):
    is_trained: bool = False
    architecture: str = "Not trained"
    project_count: int = 0
    min_projects_required: int = 5
    can_train: bool = False
    last_trained_at: Optional[str] = None
    validation_loss: Optional[float] = None


class NetworkAnalytics(BaseModel):
    total_projects: int
    total_connections: int
    average_similarity: float
    cluster_count: int
    most_connected: MostConnected
    category_distribution: Dict[str, int]
    type_distribution: Dict[str, int]
    complexity_stats: ComplexityStats
    embedding_status: EmbeddingStatus


class ConnectionBuckets(BaseModel):
    total: int = 0
    strong: int = 0
    moderate: int = 0
    weak: int = 0


class Ranking(BaseModel):
    position: int
    total: int
    percentile: int
    score: float


class ProjectAnalytics(BaseModel):
    project_id: str
    title: str
    connections: ConnectionBuckets
    complexity: float
    mathematical: List[str]
    tags: List[str]
    rank_by_connections: Ranking
    rank_by_complexity: Ranking


class TrainingReport(BaseModel):
    status: str = Field(..., description="trained or skipped")
    project_count: int
    message: str = ""
    trained_at: Optional[str] = None
