"""Integration tests for rendering shapes into MSDF images."""

import math

import pytest

from msdforge.config import RenderConfig
from msdforge.core.builder import ShapeBuilder
from msdforge.core.generator import (
    PixelTransform,
    frame_shape,
    generate_msdf,
    sample_row,
    uncovered_channels,
)
from msdforge.domain import Colour, Contour, Point, SegmentKind, SegmentRef, Shape, Spline, Vector
from msdforge.io.image import median, render_preview
from msdforge.utils import RenderStats


@pytest.fixture
def square() -> Shape:
    """Counter-clockwise 4x4 square."""
    return (
        ShapeBuilder()
        .contour((0.0, 0.0))
        .line((4.0, 0.0))
        .line((4.0, 4.0))
        .line((0.0, 4.0))
        .end_contour()
        .build()
    )


class TestPixelTransform:
    """Tests for the pixel to shape mapping."""

    def test_identity(self) -> None:
        """Test the default transform."""
        transform = PixelTransform()
        assert transform.to_shape(1.0, 2.0) == Point(1.0, 2.0)
        assert transform.to_pixel_distance(1.5) == 1.5

    def test_round_trip(self) -> None:
        """Test to_pixel inverts to_shape."""
        transform = PixelTransform(scale=Vector(0.5, -0.5), translate=Vector(3.0, 7.0))
        point = transform.to_shape(4.0, 6.0)
        assert point == Point(5.0, 4.0)
        assert transform.to_pixel(point) == Point(4.0, 6.0)

    def test_mirrored_distances(self) -> None:
        """Test mirroring flips the sign and scaling converts units."""
        transform = PixelTransform(scale=Vector(0.5, -0.5))
        assert transform.orientation == -1.0
        assert transform.to_pixel_distance(1.0) == -2.0

    def test_infinite_distance_passes_through(self) -> None:
        """Test uncovered channels stay -inf."""
        transform = PixelTransform(scale=Vector(0.5, -0.5))
        assert transform.to_pixel_distance(-math.inf) == -math.inf


class TestFrameShape:
    """Tests for fitting shapes into images."""

    def test_flipped(self, square: Shape) -> None:
        """Test a y-up shape fills the padded image upside down."""
        transform = frame_shape(square, 16, 16, padding=2.0)
        top_left = transform.to_shape(2.0, 2.0)
        bottom_right = transform.to_shape(14.0, 14.0)
        assert top_left.x == pytest.approx(0.0)
        assert top_left.y == pytest.approx(4.0)
        assert bottom_right.x == pytest.approx(4.0)
        assert bottom_right.y == pytest.approx(0.0)

    def test_not_flipped(self, square: Shape) -> None:
        """Test a y-down frame."""
        transform = frame_shape(square, 16, 16, padding=2.0, flip_y=False)
        assert transform.orientation == 1.0
        assert transform.to_shape(2.0, 2.0).y == pytest.approx(0.0)

    def test_aspect_ratio_preserved(self) -> None:
        """Test a wide shape is centred vertically."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .line((8.0, 0.0))
            .line((8.0, 2.0))
            .line((0.0, 2.0))
            .end_contour()
            .build()
        )
        transform = frame_shape(shape, 10, 10, flip_y=False)
        assert transform.units_per_pixel == pytest.approx(0.8)
        assert transform.to_shape(5.0, 5.0).is_close(Point(4.0, 1.0))

    def test_empty_shape(self) -> None:
        """Test framing an empty shape does not divide by zero."""
        transform = frame_shape(Shape(), 8, 8)
        assert transform.units_per_pixel == 1.0


class TestGenerateMsdf:
    """Tests for generate_msdf."""

    def test_sample_row(self, square: Shape) -> None:
        """Test one row of distances."""
        row = sample_row(square, PixelTransform(), 1, 4)
        assert len(row) == 4
        # Pixel (1, 1) samples (1.5, 1.5), 1.5 units from the bottom and left sides
        assert row[1] == (pytest.approx(1.5), pytest.approx(1.5), pytest.approx(1.5))

    def test_inside_is_bright(self, square: Shape) -> None:
        """Test the median is above the midpoint inside and below outside."""
        transform = frame_shape(square, 16, 16, padding=2.0, flip_y=False)
        image = generate_msdf(square, 16, 16, transform=transform)

        assert median(*image.get_pixel(8, 8)) > 127
        assert median(*image.get_pixel(0, 0)) < 127

    def test_preview_shows_square(self, square: Shape) -> None:
        """Test the reconstructed outline matches the square."""
        transform = frame_shape(square, 16, 16, padding=4.0, flip_y=False)
        image = generate_msdf(square, 16, 16, transform=transform)
        preview = render_preview(image, scale=2)

        assert preview.getpixel((16, 16)) == 255
        assert preview.getpixel((2, 2)) == 0
        assert preview.getpixel((29, 16)) == 0

    def test_workers_do_not_change_result(self, square: Shape) -> None:
        """Test in-process and multi-process rendering agree byte for byte."""
        transform = frame_shape(square, 12, 12, padding=1.0)
        serial = generate_msdf(square, 12, 12, transform=transform)
        parallel = generate_msdf(square, 12, 12, transform=transform, max_workers=2)
        assert serial.to_pil().tobytes() == parallel.to_pil().tobytes()

    def test_deterministic(self, square: Shape) -> None:
        """Test repeated renders are identical."""
        transform = frame_shape(square, 8, 8)
        first = generate_msdf(square, 8, 8, transform=transform)
        second = generate_msdf(square, 8, 8, transform=transform)
        assert first.to_pil().tobytes() == second.to_pil().tobytes()

    def test_config(self, square: Shape) -> None:
        """Test the distance range comes from the render config."""
        config = RenderConfig(max_distance=2.0)
        image = generate_msdf(square, 4, 4, config=config)
        assert image.max_distance == 2.0

    def test_progress_and_stats(self, square: Shape) -> None:
        """Test progress is reported per row and statistics are filled in."""
        calls: list[tuple[int, int]] = []
        stats = RenderStats()
        generate_msdf(
            square,
            6,
            5,
            stats=stats,
            progress_callback=lambda done, total: calls.append((done, total)),
        )

        assert calls[-1] == (5, 5)
        assert len(calls) == 5
        assert stats.pixel_count == 30
        assert stats.workers == 1
        assert stats.uncovered_channels == 0
        assert stats.duration_seconds >= 0.0

    def test_uncovered_channels_are_dark(self) -> None:
        """Test a shape carrying only red leaves green and blue at zero."""
        points = (Point(0.0, 0.0), Point(4.0, 0.0), Point(0.0, 4.0), Point(0.0, 0.0))
        segments = tuple(SegmentRef(SegmentKind.LINE, i) for i in range(3))
        shape = Shape(points, segments, (Spline(range(0, 3), Colour.RED),), (Contour(range(0, 1)),))
        assert uncovered_channels(shape) == 2

        image = generate_msdf(shape, 4, 4)
        _, g, b = image.get_pixel(1, 1)
        assert (g, b) == (0, 0)

    def test_empty_shape(self) -> None:
        """Test an empty shape renders black."""
        stats = RenderStats()
        image = generate_msdf(Shape(), 3, 3, stats=stats)
        assert set(image.to_pil().tobytes()) == {0}
        assert stats.uncovered_channels == 3
