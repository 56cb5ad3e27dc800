"""
Unified configuration system for the clustering pipeline.

## Configuration Philosophy

**Single Source of Truth: config.json file**
- All tunables live in one JSON file validated by `docluster.config_schema`
- Missing file = built-in defaults (the reference clustering behaviour)
- Invalid file = immediate error

## Pipeline Stages

- STAGE 1: Preprocessing (drop binary / blank / too-short documents)
- STAGE 2: Vectorization (statistics + topic patterns + semantic relationships)
- STAGE 3: Clustering (K-means and DBSCAN, best silhouette wins)
- STAGE 4: Labeling (key terms, category scoring, unique labels)

## Usage

```python
from docluster.config import get_config, ClusteringConfig

config = get_config()
clustering_config = ClusteringConfig.from_config(config.clustering)
```
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from docluster.config_schema import (
    RootConfig,
    load_config as load_json_config,
    ClusteringConfig as ClusteringSchema,
    VectorizationConfig as VectorizationSchema,
    LabelingConfig as LabelingSchema,
    PreprocessingConfig as PreprocessingSchema,
)
from docluster.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_METRICS = ("cosine", "euclidean")
SUPPORTED_STRATEGIES = ("heuristic", "elbow")

# Global config instance - loaded once on first access
_CONFIG: Optional[RootConfig] = None


def get_config(reload: bool = False, config_path: Optional[Path] = None) -> RootConfig:
    """
    Get validated configuration.

    Loads and validates config.json on first call, then caches the result.

    Args:
        reload: Force reload (default: False)
        config_path: Optional explicit path to config.json

    Returns:
        Validated RootConfig instance

    Raises:
        FileNotFoundError: If an explicit config file does not exist
        ValueError: If validation fails
    """
    global _CONFIG

    if _CONFIG is None or reload:
        try:
            _CONFIG = load_json_config(config_path)
            logger.info("Configuration loaded and validated successfully")
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise

    return _CONFIG


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}", cause=e)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}", cause=e)


@dataclass
class ClusteringConfig:
    """
    Configuration for the clustering engines and the algorithm selector.
    """

    # Shared
    metric: str = "cosine"

    # K-means
    max_iterations: int = 20
    convergence_threshold: float = 0.001
    random_state: Optional[int] = None

    # Parameter derivation
    min_k: int = 2
    max_k: int = 10
    epsilon_scale: float = 1.5
    min_pts_floor: int = 2
    min_pts_ceiling: int = 4
    parameter_strategy: str = "heuristic"

    # DBSCAN noise folding
    noise_singleton_limit: int = 3

    def __post_init__(self):
        """Validate parameters."""
        if self.metric not in SUPPORTED_METRICS:
            raise ConfigurationError(
                f"metric must be one of {SUPPORTED_METRICS}, got {self.metric!r}"
            )
        if self.parameter_strategy not in SUPPORTED_STRATEGIES:
            raise ConfigurationError(
                f"parameter_strategy must be one of {SUPPORTED_STRATEGIES}, "
                f"got {self.parameter_strategy!r}"
            )
        if self.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.convergence_threshold < 0:
            raise ConfigurationError(
                f"convergence_threshold must be non-negative, got {self.convergence_threshold}"
            )
        if not 1 <= self.min_k <= self.max_k:
            raise ConfigurationError(
                f"need 1 <= min_k <= max_k, got min_k={self.min_k}, max_k={self.max_k}"
            )
        if not 1 <= self.min_pts_floor <= self.min_pts_ceiling:
            raise ConfigurationError(
                f"need 1 <= min_pts_floor <= min_pts_ceiling, got "
                f"{self.min_pts_floor} and {self.min_pts_ceiling}"
            )
        if self.epsilon_scale <= 0:
            raise ConfigurationError(f"epsilon_scale must be positive, got {self.epsilon_scale}")
        if self.noise_singleton_limit < 0:
            raise ConfigurationError(
                f"noise_singleton_limit must be non-negative, got {self.noise_singleton_limit}"
            )

    @classmethod
    def from_config(cls, clustering_config: ClusteringSchema) -> "ClusteringConfig":
        """
        Load configuration from validated ClusteringSchema.

        Args:
            clustering_config: Validated ClusteringSchema from RootConfig

        Returns:
            ClusteringConfig instance
        """
        return cls(
            metric=clustering_config.metric,
            max_iterations=clustering_config.max_iterations,
            convergence_threshold=clustering_config.convergence_threshold,
            random_state=clustering_config.random_state,
            min_k=clustering_config.min_k,
            max_k=clustering_config.max_k,
            epsilon_scale=clustering_config.epsilon_scale,
            min_pts_floor=clustering_config.min_pts_floor,
            min_pts_ceiling=clustering_config.min_pts_ceiling,
            parameter_strategy=clustering_config.parameter_strategy,
            noise_singleton_limit=clustering_config.noise_singleton_limit,
        )

    @classmethod
    def from_env(cls, base: Optional["ClusteringConfig"] = None) -> "ClusteringConfig":
        """
        Load configuration from CLUSTERING_* environment variables.

        Args:
            base: Values for unset variables (built-in defaults if None)
        """
        defaults = base or cls()
        return cls(
            metric=os.getenv("CLUSTERING_METRIC", defaults.metric),
            max_iterations=_env_int("CLUSTERING_MAX_ITERATIONS", defaults.max_iterations),
            convergence_threshold=_env_float(
                "CLUSTERING_CONVERGENCE_THRESHOLD", defaults.convergence_threshold
            ),
            random_state=_env_int("CLUSTERING_RANDOM_STATE", defaults.random_state),
            min_k=_env_int("CLUSTERING_MIN_K", defaults.min_k),
            max_k=_env_int("CLUSTERING_MAX_K", defaults.max_k),
            epsilon_scale=_env_float("CLUSTERING_EPSILON_SCALE", defaults.epsilon_scale),
            min_pts_floor=_env_int("CLUSTERING_MIN_PTS_FLOOR", defaults.min_pts_floor),
            min_pts_ceiling=_env_int("CLUSTERING_MIN_PTS_CEILING", defaults.min_pts_ceiling),
            parameter_strategy=os.getenv("CLUSTERING_STRATEGY", defaults.parameter_strategy),
            noise_singleton_limit=_env_int(
                "CLUSTERING_NOISE_SINGLETON_LIMIT", defaults.noise_singleton_limit
            ),
        )


@dataclass
class VectorizerConfig:
    """Layout of the feature vector produced by FeatureVectorizer."""

    topic_slots: int = 20
    semantic_slots: int = 20
    topic_match_cap: float = 5.0
    semantic_match_cap: float = 5.0

    def __post_init__(self):
        if self.topic_slots < 0 or self.semantic_slots < 0:
            raise ConfigurationError("feature slot counts must be non-negative")
        if self.topic_match_cap <= 0 or self.semantic_match_cap <= 0:
            raise ConfigurationError("match caps must be positive")

    @classmethod
    def from_config(cls, vectorization_config: VectorizationSchema) -> "VectorizerConfig":
        return cls(
            topic_slots=vectorization_config.topic_slots,
            semantic_slots=vectorization_config.semantic_slots,
            topic_match_cap=vectorization_config.topic_match_cap,
            semantic_match_cap=vectorization_config.semantic_match_cap,
        )


@dataclass
class LabelingConfig:
    """Scoring weights for category labels and summary sizes."""

    key_terms_per_document: int = 8
    top_terms: int = 8
    frequency_weight: float = 3.0
    presence_score: float = 2.0
    top_term_bonus: float = 5.0
    fallback_label: str = "Documents"

    def __post_init__(self):
        if self.key_terms_per_document < 1 or self.top_terms < 1:
            raise ConfigurationError("key_terms_per_document and top_terms must be positive")
        if not self.fallback_label.strip():
            raise ConfigurationError("fallback_label must not be blank")

    @classmethod
    def from_config(cls, labeling_config: LabelingSchema) -> "LabelingConfig":
        return cls(
            key_terms_per_document=labeling_config.key_terms_per_document,
            top_terms=labeling_config.top_terms,
            frequency_weight=labeling_config.frequency_weight,
            presence_score=labeling_config.presence_score,
            top_term_bonus=labeling_config.top_term_bonus,
            fallback_label=labeling_config.fallback_label,
        )


@dataclass
class PreprocessingConfig:
    """Input filtering applied before vectorization."""

    enable_filter: bool = True
    min_document_length: int = 10
    min_documents: int = 2

    @classmethod
    def from_config(cls, preprocessing_config: PreprocessingSchema) -> "PreprocessingConfig":
        return cls(
            enable_filter=preprocessing_config.enable_filter,
            min_document_length=preprocessing_config.min_document_length,
            min_documents=preprocessing_config.min_documents,
        )

    @classmethod
    def from_env(cls, base: Optional["PreprocessingConfig"] = None) -> "PreprocessingConfig":
        defaults = base or cls()
        return cls(
            enable_filter=_env_bool("PREPROCESSING_ENABLE_FILTER", defaults.enable_filter),
            min_document_length=_env_int(
                "PREPROCESSING_MIN_LENGTH", defaults.min_document_length
            ),
            min_documents=_env_int("PREPROCESSING_MIN_DOCUMENTS", defaults.min_documents),
        )
