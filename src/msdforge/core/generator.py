"""Rasterisation of shapes into MSDF images.

This module samples a shape over a pixel grid, optionally spreading the rows
over worker processes with ProcessPoolExecutor.

Key components:
- PixelTransform: Affine map from pixel coordinates to shape coordinates
- frame_shape: Fit a shape's bounding box into an image
- sample_row: Top-level picklable function sampling one scanline
- generate_msdf: Render a whole image
"""

import math
import time
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass

import structlog

from msdforge.config import RenderConfig
from msdforge.core.distance import EPSILON, sample
from msdforge.domain import CHANNELS, Point, Shape, Vector
from msdforge.io.image import MsdfImage
from msdforge.utils import RenderStats

logger = structlog.get_logger(__name__)

Distances = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class PixelTransform:
    """Maps pixel coordinates to shape coordinates.

    ``shape = pixel * scale + translate`` per axis. Both scale components
    must have the same magnitude; a negative component mirrors that axis,
    which is how y-up outlines are drawn into y-down images.

    Attributes:
        scale: Shape units per pixel along each axis
        translate: Shape coordinates of the pixel origin
    """

    scale: Vector = Vector(1.0, 1.0)
    translate: Vector = Vector(0.0, 0.0)

    @property
    def units_per_pixel(self) -> float:
        return abs(self.scale.x)

    @property
    def orientation(self) -> float:
        """-1.0 when the transform mirrors the plane, 1.0 otherwise."""
        return -1.0 if self.scale.x * self.scale.y < 0.0 else 1.0

    def to_shape(self, x: float, y: float) -> Point:
        """Map a pixel position into shape space."""
        return Point(
            x * self.scale.x + self.translate.x,
            y * self.scale.y + self.translate.y,
        )

    def to_pixel(self, point: Point) -> Point:
        """Map a shape point into pixel space."""
        return Point(
            (point.x - self.translate.x) / self.scale.x,
            (point.y - self.translate.y) / self.scale.y,
        )

    def to_pixel_distance(self, distance: float) -> float:
        """Convert a signed shape-space distance into pixels.

        Mirroring swaps left and right, so it flips the sign. Infinite
        distances mark uncovered channels and pass through unchanged.
        """
        if math.isinf(distance):
            return distance
        return distance / self.units_per_pixel * self.orientation


def frame_shape(
    shape: Shape, width: int, height: int, padding: float = 0.0, flip_y: bool = True
) -> PixelTransform:
    """Fit a shape's bounding box into an image, preserving aspect ratio.

    The shape is centred and scaled uniformly so that its bounding box fits
    inside the image minus ``padding`` pixels on every side.

    Args:
        shape: Shape to frame
        width: Image width in pixels
        height: Image height in pixels
        padding: Empty margin in pixels
        flip_y: Treat the shape as y-up (fonts) and the image as y-down

    Returns:
        PixelTransform mapping the image onto the shape
    """
    min_x, min_y, max_x, max_y = shape.bounding_box()
    available_w = max(width - 2.0 * padding, 1.0)
    available_h = max(height - 2.0 * padding, 1.0)

    units = max((max_x - min_x) / available_w, (max_y - min_y) / available_h)
    if units <= 0.0:
        units = 1.0

    centre_x = (min_x + max_x) / 2.0
    centre_y = (min_y + max_y) / 2.0
    scale_y = -units if flip_y else units

    return PixelTransform(
        scale=Vector(units, scale_y),
        translate=Vector(
            centre_x - width / 2.0 * units,
            centre_y - height / 2.0 * scale_y,
        ),
    )


def sample_row(
    shape: Shape,
    transform: PixelTransform,
    y: int,
    width: int,
    epsilon: float = EPSILON,
) -> list[Distances]:
    """Sample one scanline at pixel centres.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor.

    Returns:
        Signed distances in pixels for each pixel of the row
    """
    row: list[Distances] = []
    for x in range(width):
        point = transform.to_shape(x + 0.5, y + 0.5)
        r, g, b = sample(shape, point, epsilon)
        row.append(
            (
                transform.to_pixel_distance(r),
                transform.to_pixel_distance(g),
                transform.to_pixel_distance(b),
            )
        )
    return row


def uncovered_channels(shape: Shape) -> int:
    """Number of output channels that no spline of the shape carries."""
    covered = [any(s.colour.has_channel(c) for s in shape.splines) for c in CHANNELS]
    return covered.count(False)


def generate_msdf(
    shape: Shape,
    width: int,
    height: int,
    config: RenderConfig | None = None,
    transform: PixelTransform | None = None,
    max_workers: int | None = None,
    epsilon: float = EPSILON,
    stats: RenderStats | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> MsdfImage:
    """Render a shape into an MSDF image.

    Each pixel samples the shape at its centre ``(x + 0.5, y + 0.5)`` mapped
    through ``transform``. With more than one worker, rows are sampled in a
    process pool; the result does not depend on the worker count.

    Args:
        shape: Shape to render
        width: Image width in pixels
        height: Image height in pixels
        config: Render settings; ``max_distance`` sets the encoded range
        transform: Pixel to shape mapping (identity if None)
        max_workers: Worker processes (defaults to ``config.max_workers``;
            None or 1 samples in-process)
        epsilon: Threshold for treating two distances as equal
        stats: Optional statistics object to fill in
        progress_callback: Optional callback(completed_rows, total_rows)

    Returns:
        The encoded image
    """
    config = config or RenderConfig()
    transform = transform or PixelTransform()
    if max_workers is None:
        max_workers = config.max_workers
    stats = stats if stats is not None else RenderStats()

    stats.width = width
    stats.height = height
    stats.workers = max_workers or 1
    stats.uncovered_channels = uncovered_channels(shape)
    stats.start_time = time.time()

    logger.info(
        "Starting render",
        width=width,
        height=height,
        contours=len(shape.contours),
        splines=len(shape.splines),
        workers=stats.workers,
    )
    if stats.uncovered_channels:
        logger.warning(
            "Some channels are not carried by any spline",
            uncovered=stats.uncovered_channels,
        )

    image = MsdfImage(width, height, max_distance=config.max_distance)

    if stats.workers > 1 and height > 1:
        rows = _sample_rows_parallel(
            shape, transform, width, height, stats.workers, epsilon, progress_callback
        )
    else:
        rows = {}
        for y in range(height):
            rows[y] = sample_row(shape, transform, y, width, epsilon)
            if progress_callback is not None:
                progress_callback(y + 1, height)

    for y, row in rows.items():
        for x, distances in enumerate(row):
            image.set_distances(x, y, distances)

    stats.end_time = time.time()
    logger.info(
        "Render complete",
        pixels=stats.pixel_count,
        duration_seconds=round(stats.duration_seconds, 3),
    )
    return image


def _sample_rows_parallel(
    shape: Shape,
    transform: PixelTransform,
    width: int,
    height: int,
    max_workers: int,
    epsilon: float,
    progress_callback: Callable[[int, int], None] | None,
) -> dict[int, list[Distances]]:
    rows: dict[int, list[Distances]] = {}
    pending_futures: dict = {}

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        for y in range(height):
            future = executor.submit(sample_row, shape, transform, y, width, epsilon)
            pending_futures[future] = y

        try:
            for future in as_completed(pending_futures):
                y = pending_futures.pop(future)
                rows[y] = future.result()
                if progress_callback is not None:
                    progress_callback(len(rows), height)
        except KeyboardInterrupt:
            logger.info("Cancellation requested by user", completed_rows=len(rows))
            executor.shutdown(wait=True, cancel_futures=True)
            raise

    return rows

