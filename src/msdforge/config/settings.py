"""Configuration settings for msdforge."""

from pathlib import Path

from pydantic import BaseModel, Field


class GeometryConfig(BaseModel):
    """Tolerances used by the builder and the distance engine.

    Distances are compared in shape units, so for very large or very small
    outlines the tolerances may need scaling with the outline.
    """

    epsilon: float = Field(
        default=1e-4,
        gt=0.0,
        le=0.1,
        description="Threshold for treating two distances as equal",
    )
    corner_tolerance: float = Field(
        default=1e-4,
        gt=0.0,
        le=1.0,
        description="Maximum difference between unit tangents at a smooth join",
    )
    point_tolerance: float = Field(
        default=1e-4,
        gt=0.0,
        le=1.0,
        description="Maximum distance between points considered coincident",
    )


class RenderConfig(BaseModel):
    """Configuration for rasterising a shape into an MSDF image."""

    width: int = Field(
        default=32,
        ge=1,
        le=8192,
        description="Output image width in pixels",
    )
    height: int = Field(
        default=32,
        ge=1,
        le=8192,
        description="Output image height in pixels",
    )
    max_distance: float = Field(
        default=5.0,
        gt=0.0,
        le=1000.0,
        description="Largest representable distance in pixels",
    )
    padding: float = Field(
        default=2.0,
        ge=0.0,
        le=1000.0,
        description="Empty margin around a framed shape in pixels",
    )
    max_workers: int | None = Field(
        default=None,
        description="Worker processes for row sampling (None = sample in-process)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class MsdfSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> MsdfSettings:
    """Get default application settings."""
    return MsdfSettings()
