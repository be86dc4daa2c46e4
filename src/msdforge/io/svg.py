"""SVG rendering of coloured shapes.

Each spline is stroked in its channel colour, which makes the corner
detection and colour assignment easy to inspect in a browser. Splines of the
same colour are collected into a single ``<path>`` element.
"""

import math

from msdforge.core.arc import CentreParam
from msdforge.core.primitives import segment_at
from msdforge.domain import Colour, SegmentKind, Shape, Spline

# Stroke colours in drawing order
_COLOUR_ORDER = (
    Colour.WHITE,
    Colour.CYAN,
    Colour.MAGENTA,
    Colour.YELLOW,
    Colour.RED,
    Colour.GREEN,
    Colour.BLUE,
    Colour.BLACK,
)


def _num(value: float) -> str:
    """Format a coordinate compactly."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _arc_commands(params: CentreParam) -> list[str]:
    """SVG ``A`` commands for an arc, split in two when it is a full ellipse."""
    if abs(params.delta) >= math.tau - 1e-9:
        half = params.delta / 2.0
        pieces = [
            CentreParam(params.centre, params.r, params.k, params.phi, params.theta, half),
            CentreParam(params.centre, params.r, params.k, params.phi, params.theta + half, half),
        ]
    else:
        pieces = [params]

    commands = []
    for piece in pieces:
        arc = piece.to_endpoint()
        commands.append(
            f"A{_num(arc.rx)},{_num(arc.ry)},{_num(math.degrees(arc.phi))},"
            f"{int(arc.large_arc)},{int(arc.sweep_ccw)},{_num(arc.end.x)},{_num(arc.end.y)}"
        )
    return commands


def spline_path_data(shape: Shape, spline: Spline) -> str:
    """Path data (the ``d`` attribute) for one spline."""
    parts: list[str] = []
    for i, ref in enumerate(shape.segment_refs_of(spline)):
        segment = segment_at(shape, ref)
        ps = segment.points
        if i == 0:
            parts.append(f"M{_num(segment.start.x)},{_num(segment.start.y)}")

        if ref.kind is SegmentKind.LINE:
            parts.append(f"L{_num(ps[1].x)},{_num(ps[1].y)}")
        elif ref.kind is SegmentKind.QUADRATIC_BEZIER:
            parts.append(f"Q{_num(ps[1].x)},{_num(ps[1].y)},{_num(ps[2].x)},{_num(ps[2].y)}")
        elif ref.kind is SegmentKind.CUBIC_BEZIER:
            parts.append(
                f"C{_num(ps[1].x)},{_num(ps[1].y)},{_num(ps[2].x)},{_num(ps[2].y)},"
                f"{_num(ps[3].x)},{_num(ps[3].y)}"
            )
        elif ref.kind is SegmentKind.ELLIPTICAL_ARC:
            parts.extend(_arc_commands(CentreParam.from_points(ps)))
        else:
            raise ValueError(f"Unknown segment kind: {ref.kind}")
    return " ".join(parts)


def shape_to_svg(
    shape: Shape, margin: float = 1.0, stroke_width: float = 1.0, flip_y: bool = False
) -> str:
    """Render a shape as an SVG document.

    Args:
        shape: Shape to render
        margin: Space around the shape's bounding box, in shape units
        stroke_width: Stroke width, in shape units
        flip_y: Mirror vertically, for y-up outlines such as fonts

    Returns:
        SVG document as a string
    """
    min_x, min_y, max_x, max_y = shape.bounding_box()
    width = max_x - min_x + 2.0 * margin
    height = max_y - min_y + 2.0 * margin
    view_x = min_x - margin
    view_y = (-max_y if flip_y else min_y) - margin

    groups: dict[Colour, list[str]] = {}
    for contour in shape.contours:
        for spline in shape.splines_of(contour):
            groups.setdefault(spline.colour, []).append(spline_path_data(shape, spline))

    lines = [
        f"<svg width='{_num(width)}' height='{_num(height)}' "
        f"viewBox='{_num(view_x)} {_num(view_y)} {_num(width)} {_num(height)}' "
        f"fill='none' stroke-width='{_num(stroke_width)}' "
        "style='background-color:black' xmlns='http://www.w3.org/2000/svg'>"
    ]
    if flip_y:
        lines.append("<g transform='scale(1,-1)'>")
    for colour in _COLOUR_ORDER:
        if colour in groups:
            lines.append(f"<path stroke='{colour.name.lower()}' d='{' '.join(groups[colour])}'/>")
    if flip_y:
        lines.append("</g>")
    lines.append("</svg>")
    return "\n".join(lines)
