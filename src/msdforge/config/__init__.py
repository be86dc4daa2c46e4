"""Configuration management for msdforge.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances for building and sampling shapes
- RenderConfig: Image size and distance range settings
- LoggingConfig: Logging settings
- MsdfSettings: Main application settings
"""

from msdforge.config.settings import (
    GeometryConfig,
    LoggingConfig,
    MsdfSettings,
    RenderConfig,
    get_default_settings,
)

__all__ = [
    "GeometryConfig",
    "LoggingConfig",
    "MsdfSettings",
    "RenderConfig",
    "get_default_settings",
]
