"""
Runtime Configuration Module

Provides configuration loading for digest chains and document rendering.
"""

from .runtime import (
    DigestConfig,
    DocumentConfig,
    TreeConfig,
)

__all__ = [
    "TreeConfig",
    "DigestConfig",
    "DocumentConfig",
]
