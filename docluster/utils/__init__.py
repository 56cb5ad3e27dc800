"""
Utility modules for the DocCluster pipeline.
"""

from .logger import PACKAGE_LOGGER, setup_logger

__all__ = [
    "PACKAGE_LOGGER",
    "setup_logger",
]
