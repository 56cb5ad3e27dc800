"""
Custom exception hierarchy for DocCluster.

Provides typed exceptions for better error handling and debugging.
Use these instead of generic Exception where possible.

Exception Hierarchy:
    DoclusterError (base)
    ├── ValidationError → ConfigurationError, DimensionMismatchError, InputDocumentError
    ├── VectorizationError
    └── ClusteringError

Usage:
    from docluster.exceptions import InputDocumentError, DoclusterError

    try:
        outcome = pipeline.run(documents)
    except InputDocumentError as e:
        logger.warning(f"Not enough usable documents: {e}")
        # Ask the caller for more documents
    except DoclusterError as e:
        logger.error(f"Clustering failed: {e}")
"""

from typing import Any, Dict, Optional


class DoclusterError(Exception):
    """Base exception for all DocCluster errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {type(self.cause).__name__}: {self.cause})"
        return self.message


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(DoclusterError):
    """Error validating input data or configuration."""
    pass


class ConfigurationError(ValidationError):
    """Error in configuration (missing keys, invalid values, unknown metric)."""
    pass


class DimensionMismatchError(ValidationError):
    """Vectors in one run do not share the same dimension."""
    pass


class InputDocumentError(ValidationError):
    """Not enough usable documents to cluster."""
    pass


# =============================================================================
# Processing Errors
# =============================================================================

class VectorizationError(DoclusterError):
    """Error turning documents into feature vectors (bad catalogue, failed embedder)."""
    pass


class ClusteringError(DoclusterError):
    """Error running a clustering algorithm."""
    pass
