"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for row sampling.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header."""
    console.print(f"\n[bold]msdforge[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(font_path)
    console.print(line)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


def print_shape_info(glyph_name: str, contours: int, splines: int, segments: int) -> None:
    """Print a summary of a glyph's shape.

    Args:
        glyph_name: Name of the glyph
        contours: Number of contours
        splines: Number of splines (one per run between sharp corners)
        segments: Number of segments
    """
    console.print(
        f"  [bold]{glyph_name}[/bold] {SYM_DOT} {contours} contours {SYM_DOT} "
        f"{splines} splines {SYM_DOT} {segments} segments"
    )


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_render_info(width: int, height: int, workers: int) -> None:
    """Print rendering configuration."""
    suffix = "worker" if workers == 1 else "workers"
    console.print(f"  {width}x{height} px {SYM_DOT} {workers} {suffix} {SYM_DOT} Ctrl+C to cancel")


def print_success(output_path: str, total_time_s: float | None = None, details: str | None = None) -> None:
    """Print success message.

    Args:
        output_path: Path to output file
        total_time_s: Total time in seconds
        details: Optional secondary line
    """
    header = f"\n[bold green]{SYM_OK} Complete[/bold green]"
    if total_time_s is not None:
        header += f" in {_format_time(total_time_s)}"
    console.print(header)

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)
    if details:
        console.print(f"  {details}")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"  [yellow]{SYM_DOT} {message}[/yellow]")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold] {SYM_DOT} no output file created")
