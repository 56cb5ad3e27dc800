"""
Shared Backend Dependencies

Centralizes dependency injection for the clustering routes. Tests replace
`get_pipeline` through `app.dependency_overrides`.
"""

import logging
from typing import Optional

from docluster.pipeline import DocumentClusteringPipeline

logger = logging.getLogger(__name__)

_pipeline: Optional[DocumentClusteringPipeline] = None


def set_pipeline(pipeline: Optional[DocumentClusteringPipeline]) -> None:
    """Set the global pipeline (called from main.py lifespan)."""
    global _pipeline
    _pipeline = pipeline


def get_pipeline() -> DocumentClusteringPipeline:
    """Dependency injection for DocumentClusteringPipeline (built lazily from config.json)."""
    global _pipeline
    if _pipeline is None:
        logger.info("Building clustering pipeline from configuration")
        _pipeline = DocumentClusteringPipeline.from_config()
    return _pipeline
