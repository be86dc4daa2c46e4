"""Command-line interface for msdforge.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Render a glyph's MSDF to PNG
- Draw a glyph's coloured splines as SVG
- Preview an MSDF by reconstructing its outline
"""

from msdforge.cli.app import cli, main

__all__ = ["cli", "main"]
