"""
JSON Configuration Schema for DocCluster.

This module defines the configuration schema using Pydantic models.
Every section has defaults that reproduce the reference clustering behaviour,
so the library works without a config.json. When config.json exists it is
validated strictly: wrong types and unknown keys fail on load.
"""

import json
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class ClusteringConfig(BaseModel):
    """Clustering engines and algorithm selection."""

    model_config = ConfigDict(strict=True, extra="forbid")

    metric: Literal["cosine", "euclidean"] = Field(
        "cosine",
        description="Distance metric shared by K-means, DBSCAN and the silhouette score"
    )
    max_iterations: int = Field(
        20,
        description="Maximum K-means iterations",
        ge=1
    )
    convergence_threshold: float = Field(
        0.001,
        description="K-means stops once no centroid moves further than this",
        ge=0.0
    )
    random_state: Optional[int] = Field(
        None,
        description="Seed for k-means++ initialization (None = non-deterministic)"
    )
    min_k: int = Field(2, description="Lower bound for the derived K-means k", ge=1)
    max_k: int = Field(10, description="Upper bound for the derived K-means k", ge=1)
    epsilon_scale: float = Field(
        1.5,
        description="DBSCAN epsilon = mean pairwise cosine distance * epsilon_scale",
        gt=0.0
    )
    min_pts_floor: int = Field(2, description="Lower bound for DBSCAN minPts", ge=1)
    min_pts_ceiling: int = Field(4, description="Upper bound for DBSCAN minPts", ge=1)
    noise_singleton_limit: int = Field(
        3,
        description="DBSCAN noise counts up to this become singleton clusters",
        ge=0
    )
    parameter_strategy: Literal["heuristic", "elbow"] = Field(
        "heuristic",
        description="How k and epsilon are derived from the vectors"
    )

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_k > self.max_k:
            raise ValueError(f"min_k ({self.min_k}) must not exceed max_k ({self.max_k})")
        if self.min_pts_floor > self.min_pts_ceiling:
            raise ValueError(
                f"min_pts_floor ({self.min_pts_floor}) must not exceed "
                f"min_pts_ceiling ({self.min_pts_ceiling})"
            )
        return self


class VectorizationConfig(BaseModel):
    """Feature vectorizer layout (the statistics block is always 10 features)."""

    model_config = ConfigDict(strict=True, extra="forbid")

    topic_slots: int = Field(20, description="Slots reserved for topic-pattern features", ge=0)
    semantic_slots: int = Field(20, description="Slots reserved for semantic-relationship features", ge=0)
    topic_match_cap: float = Field(5.0, description="Matches that saturate a topic feature", gt=0.0)
    semantic_match_cap: float = Field(5.0, description="Score that saturates a semantic feature", gt=0.0)


class LabelingConfig(BaseModel):
    """Cluster labeling and summaries."""

    model_config = ConfigDict(strict=True, extra="forbid")

    key_terms_per_document: int = Field(8, description="TF-IDF key terms kept per document", ge=1)
    top_terms: int = Field(8, description="Top terms reported per cluster", ge=1)
    frequency_weight: float = Field(3.0, description="Score per occurrence of a measured keyword", ge=0.0)
    presence_score: float = Field(2.0, description="Flat score for an unmeasured keyword", ge=0.0)
    top_term_bonus: float = Field(5.0, description="Bonus per top term matching a keyword", ge=0.0)
    fallback_label: str = Field("Documents", description="Label when nothing else applies")


class PreprocessingConfig(BaseModel):
    """Input filtering before vectorization."""

    model_config = ConfigDict(strict=True, extra="forbid")

    enable_filter: bool = Field(True, description="Drop binary, blank and too-short documents")
    min_document_length: int = Field(10, description="Minimum characters per document", ge=0)
    min_documents: int = Field(2, description="Minimum usable documents per request", ge=1)


class LoggingConfig(BaseModel):
    """Logging setup for the CLI and backend."""

    model_config = ConfigDict(strict=True, extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("INFO")
    format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file: Optional[str] = Field(None, description="Optional log file path")


class RootConfig(BaseModel):
    """
    Root configuration.

    Strict validation enabled:
    - No automatic type coercion ("20" will not be converted to 20)
    - Unknown sections are rejected
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    vectorization: VectorizationConfig = Field(default_factory=VectorizationConfig)
    labeling: LabelingConfig = Field(default_factory=LabelingConfig)
    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_json_file(cls, path: Path) -> "RootConfig":
        """
        Load configuration from JSON file with strict validation.

        Args:
            path: Path to config.json

        Returns:
            Validated RootConfig instance

        Raises:
            FileNotFoundError: If config.json does not exist
            ValueError: If validation fails or the JSON is malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {path}\n"
                f"Please create config.json from config.json.example:\n"
                f"  cp config.json.example config.json"
            )

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in {path}:\n{e}\n"
                f"Please fix the JSON syntax error."
            ) from e
        except UnicodeDecodeError as e:
            raise ValueError(
                f"Invalid UTF-8 encoding in {path}:\n{e}\n"
                f"Please save the file with UTF-8 encoding."
            ) from e

        try:
            return cls(**data)
        except ValidationError as e:
            raise ValueError(
                f"Configuration validation failed:\n{e}\n\n"
                f"Please check config.json matches the required schema.\n"
                f"See config.json.example for reference."
            ) from e


def load_config(config_path: Optional[Path] = None) -> RootConfig:
    """
    Load and validate configuration.

    Args:
        config_path: Optional path to config.json. Defaults to $DOCLUSTER_CONFIG,
            then ./config.json. A missing default file yields the built-in defaults;
            a missing explicit path is an error.

    Returns:
        Validated RootConfig instance

    Raises:
        FileNotFoundError: If an explicitly requested config file does not exist
        ValueError: If validation fails
    """
    load_dotenv()

    if config_path is None:
        env_path = os.getenv("DOCLUSTER_CONFIG")
        if env_path:
            return RootConfig.from_json_file(Path(env_path))

        config_path = Path.cwd() / "config.json"
        if not config_path.exists():
            return RootConfig()

    return RootConfig.from_json_file(config_path)
