"""Font reader for loading glyph outlines from TTF/OTF fonts.

This module provides the FontReader class for loading font files and
turning glyph outlines into shapes.
"""

from pathlib import Path

from fontTools.misc.transform import Transform
from fontTools.pens.recordingPen import DecomposingRecordingPen
from fontTools.ttLib import TTFont, TTLibError

from msdforge.config import GeometryConfig
from msdforge.core.builder import ShapeBuilder
from msdforge.domain import Shape
from msdforge.exceptions import FontLoadError, GlyphNotFoundError
from msdforge.io.pen import draw_recording


class FontReader:
    """Loads TTF/OTF fonts and extracts glyph outlines as shapes.

    Composite glyphs are decomposed into their component outlines.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            name = reader.glyph_name_for_char("A")
            shape = reader.get_shape(name)
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the file does not exist or is not a valid font
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            self._font = TTFont(str(self._font_path))
        except (TTLibError, OSError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def units_per_em(self) -> int:
        """Return font's units per em.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["maxp"].numGlyphs

    def glyph_name_for_char(self, char: str) -> str:
        """Look up the glyph mapped to a character.

        Args:
            char: A single character

        Returns:
            Glyph name from the font's best Unicode cmap

        Raises:
            GlyphNotFoundError: If the font has no glyph for the character
            RuntimeError: If font has not been loaded yet
        """
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        cmap = self._require_font().getBestCmap() or {}
        name = cmap.get(ord(char))
        if name is None:
            raise GlyphNotFoundError(f"U+{ord(char):04X}")
        return name

    def get_shape(
        self,
        glyph_name: str,
        transform: Transform | None = None,
        config: GeometryConfig | None = None,
    ) -> Shape:
        """Build the shape of a glyph.

        Args:
            glyph_name: Name of the glyph
            transform: Optional affine transform applied to the outline
            config: Builder tolerances

        Returns:
            Shape in font units (or transformed units)

        Raises:
            GlyphNotFoundError: If the glyph does not exist
            RuntimeError: If font has not been loaded yet
        """
        glyph_set = self._require_font().getGlyphSet()
        if glyph_name not in glyph_set:
            raise GlyphNotFoundError(glyph_name)

        pen = DecomposingRecordingPen(glyph_set)
        glyph_set[glyph_name].draw(pen)

        builder = draw_recording(pen.value, ShapeBuilder(config), transform)
        return builder.build()

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
