"""CLI application entry point for msdforge.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from msdforge import __version__
from msdforge.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_font_info,
    print_header,
    print_render_info,
    print_shape_info,
    print_step,
    print_success,
    print_warning,
)
from msdforge.config import LoggingConfig, MsdfSettings, RenderConfig
from msdforge.core import frame_shape, generate_msdf
from msdforge.domain import Shape
from msdforge.exceptions import FontLoadError, MsdfError
from msdforge.io import FontReader, MsdfImage, render_preview, shape_to_svg
from msdforge.utils import RenderStats, configure_logging

# Create the Typer app
app = typer.Typer(
    name="msdforge",
    help="Generate multi-channel signed distance fields from font glyphs.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]msdforge[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate multi-channel signed distance fields from font glyphs."""


def _load_glyph(
    font_path: Path, char: str, settings: MsdfSettings, quiet: bool
) -> tuple[str, Shape]:
    """Load a glyph's shape by character, or by glyph name if ``char`` is longer.

    Raises:
        FontLoadError: If the font cannot be loaded
        GlyphNotFoundError: If the glyph does not exist
    """
    if not quiet:
        print_step("Loading font")

    with FontReader(font_path) as reader:
        if not quiet:
            print_font_info(str(font_path), reader.glyph_count, reader.units_per_em)
        glyph_name = reader.glyph_name_for_char(char) if len(char) == 1 else char
        shape = reader.get_shape(glyph_name, config=settings.geometry)

    if not quiet:
        print_shape_info(glyph_name, len(shape.contours), len(shape.splines), len(shape.segments))
        if shape.is_empty():
            print_warning("Glyph has no outline")
    return glyph_name, shape


def _check_input(path: Path) -> None:
    if not path.exists():
        print_error(
            f"Input file not found: {path}",
            details=f"The file '{path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not path.is_file():
        print_error(f"Input path is not a file: {path}")
        raise typer.Exit(code=1)


@app.command()
def glyph(
    input_font: Annotated[
        Path,
        typer.Argument(help="Path to input TTF/OTF font file", show_default=False),
    ],
    char: Annotated[
        str,
        typer.Argument(help="Character to render, or a glyph name", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output PNG path (default: {glyph}.png)"),
    ] = None,
    size: Annotated[
        int,
        typer.Option("--size", "-s", help="Image width and height in pixels", min=1, max=8192),
    ] = 32,
    distance_range: Annotated[
        float,
        typer.Option("--range", "-r", help="Largest encoded distance in pixels", min=0.01),
    ] = 5.0,
    padding: Annotated[
        float,
        typer.Option("--padding", "-p", help="Margin around the glyph in pixels", min=0.0),
    ] = 2.0,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-j", help="Number of worker processes (default: none)", min=1),
    ] = None,
    preview: Annotated[
        Path | None,
        typer.Option("--preview", help="Also write a thresholded preview PNG"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write detailed logs to file"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Render the MSDF of a single glyph to a PNG image.

    Example:
        msdforge glyph Roboto-Regular.ttf A -s 64 -o A.png
    """
    _check_input(input_font)

    settings = MsdfSettings(
        render=RenderConfig(
            width=size,
            height=size,
            max_distance=distance_range,
            padding=padding,
            max_workers=workers,
        ),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)

    try:
        glyph_name, shape = _load_glyph(input_font, char, settings, quiet)
        output_path = output or Path(f"{glyph_name}.png")

        render = settings.render
        transform = frame_shape(shape, render.width, render.height, render.padding)
        stats = RenderStats()

        if not quiet:
            print_step("Rendering")
            print_render_info(render.width, render.height, render.max_workers or 1)
            with create_progress() as progress:
                task_id = progress.add_task("Sampling rows", total=render.height)

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                image = generate_msdf(
                    shape,
                    render.width,
                    render.height,
                    config=render,
                    transform=transform,
                    epsilon=settings.geometry.epsilon,
                    stats=stats,
                    progress_callback=update_progress,
                )
        else:
            image = generate_msdf(
                shape,
                render.width,
                render.height,
                config=render,
                transform=transform,
                epsilon=settings.geometry.epsilon,
                stats=stats,
            )

        image.save(output_path)
        if preview is not None:
            render_preview(image).save(preview)

        if not quiet:
            details = f"preview: {preview}" if preview is not None else None
            print_success(str(output_path), stats.duration_seconds, details)

    except KeyboardInterrupt:
        if not quiet:
            print_cancellation_notice()
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code
    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except MsdfError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def svg(
    input_font: Annotated[
        Path,
        typer.Argument(help="Path to input TTF/OTF font file", show_default=False),
    ],
    char: Annotated[
        str,
        typer.Argument(help="Character to draw, or a glyph name", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output SVG path (default: {glyph}.svg)"),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Draw a glyph's splines in their channel colours as SVG.

    Useful for checking where sharp corners were detected.
    """
    _check_input(input_font)
    settings = MsdfSettings()

    if not quiet:
        print_header(__version__)

    try:
        glyph_name, shape = _load_glyph(input_font, char, settings, quiet)
        output_path = output or Path(f"{glyph_name}.svg")

        bbox = shape.bounding_box()
        extent = max(bbox[2] - bbox[0], bbox[3] - bbox[1], 1.0)
        document = shape_to_svg(
            shape, margin=extent * 0.05, stroke_width=extent * 0.005, flip_y=True
        )
        output_path.write_text(document, encoding="utf-8")

        if not quiet:
            print_success(str(output_path))

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except MsdfError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except OSError as e:
        print_error(f"Could not write SVG: {e}")
        raise typer.Exit(code=1)


@app.command(name="preview")
def preview_command(
    input_image: Annotated[
        Path,
        typer.Argument(help="Path to an MSDF PNG image", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output path (default: {name}_preview.png)"),
    ] = None,
    scale: Annotated[
        int,
        typer.Option("--scale", "-s", help="Upscaling factor", min=1, max=64),
    ] = 8,
    threshold: Annotated[
        float,
        typer.Option("--threshold", "-t", help="Inside/outside threshold in pixels"),
    ] = 0.0,
    distance_range: Annotated[
        float,
        typer.Option("--range", "-r", help="Distance range the image was encoded with", min=0.01),
    ] = 5.0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Reconstruct a sharp outline from an MSDF image by median thresholding."""
    _check_input(input_image)
    output_path = output or input_image.with_name(f"{input_image.stem}_preview.png")

    try:
        image = MsdfImage.load(input_image, max_distance=distance_range)
        render_preview(image, scale=scale, threshold=threshold).save(output_path)
    except MsdfError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except OSError as e:
        print_error(f"Could not write preview: {e}")
        raise typer.Exit(code=1)

    if not quiet:
        print_success(str(output_path), details=f"{image.width}x{image.height} px at {scale}x")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
