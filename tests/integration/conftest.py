"""Shared fixtures for integration tests."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen


def _polygon_glyph(*contours: list[tuple[int, int]]):
    pen = TTGlyphPen(None)
    for contour in contours:
        pen.moveTo(contour[0])
        for point in contour[1:]:
            pen.lineTo(point)
        pen.closePath()
    return pen.glyph()


@pytest.fixture
def test_font(tmp_path: Path) -> Path:
    """A small TrueType font.

    - "A" (U+0041): a clockwise 600x700 square
    - "O" (U+004F): the same square with a 300x400 counter
    - "space" (U+0020): no outline
    """
    outer = [(0, 0), (0, 700), (600, 700), (600, 0)]
    counter = [(150, 150), (450, 150), (450, 550), (150, 550)]

    fb = FontBuilder(unitsPerEm=1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space", "A", "O"])
    fb.setupCharacterMap({0x20: "space", 0x41: "A", 0x4F: "O"})
    fb.setupGlyf(
        {
            ".notdef": TTGlyphPen(None).glyph(),
            "space": TTGlyphPen(None).glyph(),
            "A": _polygon_glyph(outer),
            "O": _polygon_glyph(outer, counter),
        }
    )
    fb.setupHorizontalMetrics(
        {".notdef": (500, 0), "space": (250, 0), "A": (700, 0), "O": (700, 0)}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Msdf Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    path = tmp_path / "MsdfTest-Regular.ttf"
    fb.save(str(path))
    return path
