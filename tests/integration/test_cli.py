"""Integration tests for the command-line interface."""

from pathlib import Path

from PIL import Image
from typer.testing import CliRunner

from msdforge import __version__
from msdforge.cli.app import app

runner = CliRunner()


class TestVersion:
    """Tests for the version option."""

    def test_version(self):
        """Test --version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestGlyphCommand:
    """Tests for the glyph command."""

    def test_render_glyph(self, test_font: Path, tmp_path: Path):
        """Test rendering a glyph to PNG."""
        output = tmp_path / "A.png"
        result = runner.invoke(app, ["glyph", str(test_font), "A", "-o", str(output), "-s", "16", "-q"])

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.size == (16, 16)
            assert image.mode == "RGB"

    def test_render_with_preview(self, test_font: Path, tmp_path: Path):
        """Test rendering with progress output and a preview image."""
        output = tmp_path / "O.png"
        preview = tmp_path / "O-preview.png"
        result = runner.invoke(
            app,
            ["glyph", str(test_font), "O", "-o", str(output), "-s", "12", "--preview", str(preview)],
        )

        assert result.exit_code == 0, result.output
        assert "Complete" in result.output
        with Image.open(preview) as image:
            assert image.size == (96, 96)

    def test_render_by_glyph_name(self, test_font: Path, tmp_path: Path):
        """Test glyph names are accepted in place of characters."""
        output = tmp_path / "space.png"
        result = runner.invoke(app, ["glyph", str(test_font), "space", "-o", str(output), "-s", "4", "-q"])

        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_missing_font(self, tmp_path: Path):
        """Test a missing input file exits with an error."""
        result = runner.invoke(app, ["glyph", str(tmp_path / "missing.ttf"), "A"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_font(self, tmp_path: Path):
        """Test a file that is not a font exits with an error."""
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"not a font")
        result = runner.invoke(app, ["glyph", str(path), "A", "-q"])
        assert result.exit_code == 1
        assert "Could not load font" in result.output

    def test_unmapped_character(self, test_font: Path, tmp_path: Path):
        """Test a character without a glyph exits with an error."""
        result = runner.invoke(app, ["glyph", str(test_font), "Z", "-o", str(tmp_path / "Z.png"), "-q"])
        assert result.exit_code == 1
        assert "U+005A" in result.output


class TestSvgCommand:
    """Tests for the svg command."""

    def test_write_svg(self, test_font: Path, tmp_path: Path):
        """Test drawing a glyph's splines as SVG."""
        output = tmp_path / "A.svg"
        result = runner.invoke(app, ["svg", str(test_font), "A", "-o", str(output), "-q"])

        assert result.exit_code == 0, result.output
        document = output.read_text(encoding="utf-8")
        assert document.startswith("<svg")
        assert "stroke='magenta'" in document


class TestPreviewCommand:
    """Tests for the preview command."""

    def test_preview(self, test_font: Path, tmp_path: Path):
        """Test reconstructing an outline from a rendered MSDF."""
        field = tmp_path / "A.png"
        runner.invoke(app, ["glyph", str(test_font), "A", "-o", str(field), "-s", "8", "-q"])

        result = runner.invoke(app, ["preview", str(field), "--scale", "4", "-q"])

        assert result.exit_code == 0, result.output
        with Image.open(tmp_path / "A_preview.png") as image:
            assert image.size == (32, 32)
            assert image.mode == "L"
            # Centre of the glyph is inside, the corner is outside
            assert image.getpixel((16, 16)) == 255
            assert image.getpixel((0, 0)) == 0

    def test_preview_of_non_image(self, tmp_path: Path):
        """Test an unreadable image exits with an error."""
        path = tmp_path / "field.png"
        path.write_text("not a png", encoding="utf-8")
        result = runner.invoke(app, ["preview", str(path)])
        assert result.exit_code == 1
