"""Utility functions for msdforge.

This module provides utility functions including:

- Logging setup and configuration
- Rendering statistics
"""

from msdforge.utils.logging import (
    RenderStats,
    configure_logging,
)

__all__ = [
    "RenderStats",
    "configure_logging",
]
