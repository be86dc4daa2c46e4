"""Unit tests for shape construction and corner colouring."""

import math

import pytest

from msdforge.config import GeometryConfig
from msdforge.core.builder import ShapeBuilder, next_colour
from msdforge.core.primitives import segment_at
from msdforge.domain import Colour, Point, SegmentKind, Shape
from msdforge.exceptions import ArcParameterError, BuilderStateError


def colours(shape: Shape) -> list[Colour]:
    return [spline.colour for spline in shape.splines]


def square(size: float = 4.0) -> Shape:
    return (
        ShapeBuilder()
        .contour((0.0, 0.0))
        .line((size, 0.0))
        .line((size, size))
        .line((0.0, size))
        .end_contour()
        .build()
    )


class TestColourSequence:
    """Tests for colour alternation."""

    def test_next_colour(self) -> None:
        """Test the Magenta, Yellow, Cyan, Yellow, ... sequence."""
        sequence = [Colour.MAGENTA]
        for _ in range(5):
            sequence.append(next_colour(sequence[-1]))
        assert sequence == [
            Colour.MAGENTA,
            Colour.YELLOW,
            Colour.CYAN,
            Colour.YELLOW,
            Colour.CYAN,
            Colour.YELLOW,
        ]

    def test_adjacent_colours_share_one_channel(self) -> None:
        """Test neighbours in the sequence always overlap in exactly one channel."""
        colour = Colour.MAGENTA
        for _ in range(6):
            following = next_colour(colour)
            assert len((colour & following).channels()) == 1
            colour = following


class TestShapeBuilder:
    """Tests for ShapeBuilder."""

    def test_square(self) -> None:
        """Test a square gets one spline per side."""
        shape = square()
        assert len(shape.contours) == 1
        assert len(shape.segments) == 4
        assert colours(shape) == [Colour.MAGENTA, Colour.YELLOW, Colour.CYAN, Colour.YELLOW]

    def test_auto_close(self) -> None:
        """Test a closing line is added when the pen is away from the start."""
        shape = square()
        last = segment_at(shape, shape.segments[-1])
        assert last.kind is SegmentKind.LINE
        assert last.points == (Point(0.0, 4.0), Point(0.0, 0.0))

    def test_explicitly_closed_contour(self) -> None:
        """Test no closing line is added when the pen is back at the start."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .line((4.0, 0.0))
            .line((4.0, 4.0))
            .line((0.0, 0.0))
            .end_contour()
            .build()
        )
        assert len(shape.segments) == 3

    def test_segments_share_endpoints(self) -> None:
        """Test each segment starts where the previous one ended."""
        shape = square()
        segments = [segment_at(shape, ref) for ref in shape.segments]
        for before, after in zip(segments, segments[1:]):
            assert before.end == after.start
        assert segments[-1].end == segments[0].start

    def test_several_contours(self) -> None:
        """Test splines are grouped by contour."""
        builder = ShapeBuilder()
        builder.contour((0.0, 0.0)).line((4.0, 0.0)).line((0.0, 4.0)).end_contour()
        builder.contour((10.0, 0.0)).line((14.0, 0.0)).line((10.0, 4.0)).end_contour()
        shape = builder.build()

        assert len(shape.contours) == 2
        assert shape.contours[0].spline_range == range(0, 3)
        assert shape.contours[1].spline_range == range(3, 6)
        # Colouring restarts with every contour
        assert shape.splines[3].colour is Colour.MAGENTA

    def test_empty_shape(self) -> None:
        """Test a builder with no contours builds an empty shape."""
        assert ShapeBuilder().build().is_empty()

    def test_current_point(self) -> None:
        """Test the pen position follows the segments."""
        contour = ShapeBuilder().contour((1.0, 2.0))
        assert contour.current_point == Point(1.0, 2.0)
        contour.quadratic_bezier((3.0, 4.0), (5.0, 2.0))
        assert contour.current_point == Point(5.0, 2.0)

    def test_zero_length_segments_are_skipped(self) -> None:
        """Test repeated points do not add segments or shift the colours."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .line((4.0, 0.0))
            .line((4.0, 0.0))
            .line((4.0, 4.0))
            .quadratic_bezier((4.0, 4.0), (4.0, 4.0))
            .line((0.0, 4.0))
            .cubic_bezier((0.0, 4.0), (0.0, 4.0), (0.0, 4.0))
            .end_contour()
            .build()
        )
        assert len(shape.segments) == 4
        assert all(ref.kind is SegmentKind.LINE for ref in shape.segments)
        assert colours(shape) == [Colour.MAGENTA, Colour.YELLOW, Colour.CYAN, Colour.YELLOW]

    def test_contour_of_only_zero_length_segments(self) -> None:
        """Test a contour that never moves has no segments to close."""
        contour = ShapeBuilder().contour((1.0, 1.0)).line((1.0, 1.0))
        with pytest.raises(BuilderStateError, match="no segments"):
            contour.end_contour()


class TestBuilderMisuse:
    """Tests for builder state errors."""

    def test_end_empty_contour(self) -> None:
        """Test a contour needs at least one segment."""
        contour = ShapeBuilder().contour((0.0, 0.0))
        with pytest.raises(BuilderStateError, match="no segments"):
            contour.end_contour()

    def test_build_with_open_contour(self) -> None:
        """Test building while a contour is open."""
        builder = ShapeBuilder()
        builder.contour((0.0, 0.0)).line((1.0, 0.0))
        with pytest.raises(BuilderStateError, match="still open"):
            builder.build()

    def test_open_two_contours(self) -> None:
        """Test opening a contour while another is open."""
        builder = ShapeBuilder()
        builder.contour((0.0, 0.0))
        with pytest.raises(BuilderStateError):
            builder.contour((1.0, 1.0))

    def test_build_twice(self) -> None:
        """Test a builder produces a single shape."""
        builder = ShapeBuilder()
        builder.build()
        with pytest.raises(BuilderStateError, match="already been built"):
            builder.build()

    def test_reuse_ended_contour(self) -> None:
        """Test a contour builder cannot be used after end_contour."""
        builder = ShapeBuilder()
        contour = builder.contour((0.0, 0.0)).line((1.0, 0.0)).line((0.0, 1.0))
        contour.end_contour()
        with pytest.raises(BuilderStateError, match="already been ended"):
            contour.line((2.0, 2.0))

    def test_discard_empty_contour(self) -> None:
        """Test an abandoned contour leaves no trace in the shape."""
        builder = ShapeBuilder()
        contour = builder.contour((9.0, 9.0))
        assert contour.segment_count == 0
        assert contour.discard() is builder

        shape = builder.build()
        assert shape.is_empty()
        assert shape.points == ()

    def test_discard_contour_with_segments(self) -> None:
        """Test only empty contours can be discarded."""
        contour = ShapeBuilder().contour((0.0, 0.0)).line((1.0, 0.0))
        with pytest.raises(BuilderStateError, match="has segments"):
            contour.discard()


class TestCornerColouring:
    """Tests for corner detection and closing colours."""

    def test_hexagon_alternates(self) -> None:
        """Test colours alternate around a polygon."""
        builder = ShapeBuilder()
        contour = builder.contour((1.0, 0.0))
        for i in range(1, 6):
            angle = i * math.pi / 3
            contour.line((math.cos(angle), math.sin(angle)))
        shape = contour.end_contour().build()
        assert colours(shape) == [
            Colour.MAGENTA,
            Colour.YELLOW,
            Colour.CYAN,
            Colour.YELLOW,
            Colour.CYAN,
            Colour.YELLOW,
        ]

    def test_teardrop_is_white(self) -> None:
        """Test a contour with a single corner uses all channels."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .cubic_bezier((4.0, 4.0), (4.0, -4.0), (0.0, 0.0))
            .end_contour()
            .build()
        )
        assert colours(shape) == [Colour.WHITE]

    def test_lens_keeps_two_colours(self) -> None:
        """Test a contour with two corners keeps two colours."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .quadratic_bezier((2.0, 2.0), (4.0, 0.0))
            .quadratic_bezier((2.0, -2.0), (0.0, 0.0))
            .end_contour()
            .build()
        )
        assert colours(shape) == [Colour.MAGENTA, Colour.YELLOW]

    def test_smooth_wrap_takes_first_colour(self) -> None:
        """Test the spline across a smooth start point continues the first spline."""
        shape = (
            ShapeBuilder()
            .contour((2.0, 0.0))
            .line((4.0, 0.0))
            .line((4.0, 4.0))
            .line((0.0, 4.0))
            .line((0.0, 0.0))
            .end_contour()
            .build()
        )
        assert colours(shape) == [
            Colour.MAGENTA,
            Colour.YELLOW,
            Colour.CYAN,
            Colour.YELLOW,
            Colour.MAGENTA,
        ]

    def test_smooth_curves_form_one_spline(self) -> None:
        """Test tangent-continuous segments share a spline."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .line((4.0, 0.0))
            .quadratic_bezier((6.0, 0.0), (6.0, 2.0))
            .line((6.0, 4.0))
            .end_contour()
            .build()
        )
        assert shape.splines[0].segments_range == range(0, 3)

    def test_corner_tolerance(self) -> None:
        """Test a gentle bend is only a corner under a tight tolerance."""

        def build(config: GeometryConfig | None) -> Shape:
            return (
                ShapeBuilder(config)
                .contour((0.0, 0.0))
                .line((4.0, 0.0))
                .line((8.0, 0.7))
                .line((4.0, 4.0))
                .end_contour()
                .build()
            )

        assert len(build(None).splines) == 4
        assert len(build(GeometryConfig(corner_tolerance=0.5)).splines) == 3


class TestEllipticalArcs:
    """Tests for arcs added through the builder."""

    def test_full_circle(self) -> None:
        """Test a full circle is a single white spline."""
        shape = (
            ShapeBuilder()
            .contour((1.0, 0.0))
            .elliptical_arc(1.0, 1.0, 0.0, True, True, (1.0, 0.0))
            .end_contour()
            .build()
        )
        assert len(shape.segments) == 1
        assert shape.segments[0].kind is SegmentKind.ELLIPTICAL_ARC
        assert colours(shape) == [Colour.WHITE]

        segment = segment_at(shape, shape.segments[0])
        assert segment.points[0] == Point(2.0, 0.0)
        assert segment.start.is_close(Point(1.0, 0.0))
        assert segment.end == Point(1.0, 0.0)

    def test_half_circle_then_line(self) -> None:
        """Test segments after an arc start at the arc's end point."""
        shape = (
            ShapeBuilder()
            .contour((1.0, 0.0))
            .elliptical_arc(1.0, 1.0, 0.0, False, True, (-1.0, 0.0))
            .end_contour()
            .build()
        )
        arc, line = (segment_at(shape, ref) for ref in shape.segments)
        assert arc.kind is SegmentKind.ELLIPTICAL_ARC
        assert arc.sample(0.5).is_close(Point(0.0, 1.0))
        assert line.points == (Point(-1.0, 0.0), Point(1.0, 0.0))
        assert colours(shape) == [Colour.MAGENTA, Colour.YELLOW]

    def test_zero_radius_becomes_line(self) -> None:
        """Test a degenerate arc is drawn as a line."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .elliptical_arc(0.0, 1.0, 0.0, False, True, (4.0, 0.0))
            .line((0.0, 4.0))
            .end_contour()
            .build()
        )
        assert [ref.kind for ref in shape.segments] == [SegmentKind.LINE] * 3

    def test_coincident_arc_is_dropped(self) -> None:
        """Test an arc ending at its start without the large flag draws nothing."""
        shape = (
            ShapeBuilder()
            .contour((0.0, 0.0))
            .elliptical_arc(1.0, 1.0, 0.0, False, True, (0.0, 0.0))
            .line((1.0, 0.0))
            .line((0.0, 1.0))
            .end_contour()
            .build()
        )
        assert [ref.kind for ref in shape.segments] == [SegmentKind.LINE] * 3

    def test_non_finite_arc(self) -> None:
        """Test invalid arc parameters propagate."""
        contour = ShapeBuilder().contour((0.0, 0.0))
        with pytest.raises(ArcParameterError):
            contour.elliptical_arc(1.0, math.inf, 0.0, False, True, (4.0, 0.0))
