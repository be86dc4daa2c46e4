"""Exception hierarchy for msdforge."""


class MsdfError(Exception):
    """Base exception for all msdforge errors."""

    pass


class BuilderError(MsdfError):
    """Errors related to shape construction."""

    pass


class BuilderStateError(BuilderError):
    """Builder used out of sequence.

    Raised when a contour is opened while another is still open, when a
    finished contour builder is reused, or when a shape is built twice.
    """

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation}: {reason}")


class GeometryError(MsdfError):
    """Errors in geometric calculations."""

    pass


class ArcParameterError(GeometryError):
    """Elliptical arc parameters cannot describe an arc."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class RootFindingError(GeometryError):
    """Root finder produced a non-finite iterate.

    This signals a degenerate polynomial (typically coincident roots) and is
    never recovered from.
    """

    def __init__(self, coefficients: list[float], reason: str) -> None:
        self.coefficients = coefficients
        self.reason = reason
        super().__init__(f"Root finding failed for {coefficients}: {reason}")


class FontError(MsdfError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphNotFoundError(FontError):
    """Requested glyph not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class ImageError(MsdfError):
    """Errors related to distance field images."""

    pass


class ImageWriteError(ImageError):
    """Error saving an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save image '{path}': {reason}")


class ImageReadError(ImageError):
    """Error loading an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")
