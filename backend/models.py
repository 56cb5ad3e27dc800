"""
Pydantic models for API request/response validation.

These models define the contract between clients and the clustering API.
"""

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class ClusterRequest(BaseModel):
    """Documents to cluster. Non-string entries are accepted and filtered out."""

    documents: List[Any] = Field(
        ...,
        max_length=10000,
        description="Raw document texts (max 10K documents)",
    )


class ClusterSummaryModel(BaseModel):
    """Description of one cluster."""

    cluster_id: int
    name: str
    label: str
    size: int
    coherence: float
    top_terms: List[str] = Field(default_factory=list)
    description: str
    document_indices: List[int] = Field(default_factory=list)


class ClusterResponse(BaseModel):
    """Clustering outcome. Cluster members index into the accepted documents."""

    clusters: Dict[str, List[int]]
    cluster_summaries: Dict[str, ClusterSummaryModel]
    document_key_terms: List[List[str]]
    silhouette_score: float
    algorithm: Literal["K-means", "DBSCAN"]
    algorithm_details: Dict[str, Any] = Field(default_factory=dict)
    quality_metrics: Dict[str, float] = Field(default_factory=dict)
    accepted_indices: List[int]
    filtered_count: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"]
    version: str
