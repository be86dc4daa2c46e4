"""MSDF raster images.

This module stores encoded distance fields and moves them to and from PNG
files using Pillow. Distances are mapped to bytes with a fixed linear
encoding centred on 127.5, so a byte near the middle of the range lies on
the outline.
"""

import math
from pathlib import Path

from PIL import Image

from msdforge.exceptions import ImageReadError, ImageWriteError

# Largest representable distance, in pixels
MAX_DISTANCE = 5.0

# Number of byte buckets the distance range is split into
MAX_COLOUR = 256.0


def distance_color(distance: float, max_distance: float = MAX_DISTANCE) -> int:
    """Encode a signed distance as a byte.

    The distance is clamped to ``[-max_distance, max_distance]`` and mapped
    linearly onto ``[0, 255]``. The mapping is non-decreasing; ``-inf`` (an
    uncovered channel) encodes as 0.

    Examples:
        >>> distance_color(-5.0)
        0
        >>> distance_color(0.0)
        127
        >>> distance_color(5.0)
        255
    """
    clamped = min(max(distance, -max_distance), max_distance)
    value = int((clamped + max_distance) / (2.0 * max_distance) * MAX_COLOUR - 1.0)
    return min(max(value, 0), 255)


def color_distance(value: float, max_distance: float = MAX_DISTANCE) -> float:
    """Decode a byte (or an interpolated byte value) into a distance.

    Returns the distance at the centre of the byte's bucket, the inverse of
    ``distance_color`` up to quantisation.
    """
    return (value + 1.5) / MAX_COLOUR * 2.0 * max_distance - max_distance


def median(a: float, b: float, c: float) -> float:
    """Median of three values.

    Examples:
        >>> median(3.0, 1.0, 2.0)
        2.0
    """
    return max(min(a, b), min(max(a, b), c))


class MsdfImage:
    """An RGB byte buffer holding an encoded distance field.

    Pixel ``(0, 0)`` is the top-left corner. Each channel byte encodes a
    signed distance with ``distance_color``.

    Example:
        image = MsdfImage(32, 32)
        image.set_distances(0, 0, (1.0, -1.0, 0.0))
        image.save(Path("glyph.png"))
    """

    def __init__(self, width: int, height: int, max_distance: float = MAX_DISTANCE) -> None:
        """Create a black image.

        Args:
            width: Width in pixels
            height: Height in pixels
            max_distance: Distance encoded by the brightest byte
        """
        if width < 1 or height < 1:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.max_distance = max_distance
        self._data = bytearray(width * height * 3)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return (y * self.width + x) * 3

    def set_pixel(self, x: int, y: int, rgb: tuple[int, int, int]) -> None:
        """Store raw channel bytes."""
        offset = self._offset(x, y)
        self._data[offset : offset + 3] = bytes(rgb)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Read raw channel bytes."""
        offset = self._offset(x, y)
        r, g, b = self._data[offset : offset + 3]
        return r, g, b

    def set_distances(self, x: int, y: int, distances: tuple[float, float, float]) -> None:
        """Encode and store the signed distances of one pixel."""
        r, g, b = (distance_color(d, self.max_distance) for d in distances)
        self.set_pixel(x, y, (r, g, b))

    def get_distances(self, x: int, y: int) -> tuple[float, float, float]:
        """Decode the signed distances of one pixel."""
        r, g, b = (color_distance(v, self.max_distance) for v in self.get_pixel(x, y))
        return r, g, b

    def sample_bilinear(self, x: float, y: float) -> tuple[float, float, float]:
        """Decode distances at an arbitrary position by bilinear interpolation.

        Pixel values live at pixel centres; positions outside the grid of
        centres are clamped to the edge.

        Args:
            x: Horizontal position in pixels (0 is the left edge)
            y: Vertical position in pixels (0 is the top edge)

        Returns:
            Interpolated (red, green, blue) distances
        """
        u = min(max(x - 0.5, 0.0), self.width - 1.0)
        v = min(max(y - 0.5, 0.0), self.height - 1.0)
        x0, y0 = int(math.floor(u)), int(math.floor(v))
        x1, y1 = min(x0 + 1, self.width - 1), min(y0 + 1, self.height - 1)
        wx, wy = u - x0, v - y0

        p00 = self.get_pixel(x0, y0)
        p10 = self.get_pixel(x1, y0)
        p01 = self.get_pixel(x0, y1)
        p11 = self.get_pixel(x1, y1)

        r, g, b = (
            color_distance(
                (1.0 - wx) * (1.0 - wy) * p00[i]
                + wx * (1.0 - wy) * p10[i]
                + (1.0 - wx) * wy * p01[i]
                + wx * wy * p11[i],
                self.max_distance,
            )
            for i in range(3)
        )
        return r, g, b

    def to_pil(self) -> Image.Image:
        """Copy the buffer into a Pillow RGB image."""
        return Image.frombytes("RGB", (self.width, self.height), bytes(self._data))

    def save(self, path: Path) -> None:
        """Write the image as a PNG file.

        Raises:
            ImageWriteError: If the file cannot be written
        """
        try:
            self.to_pil().save(path, format="PNG")
        except (OSError, ValueError) as e:
            raise ImageWriteError(str(path), str(e)) from e

    @classmethod
    def from_pil(cls, image: Image.Image, max_distance: float = MAX_DISTANCE) -> "MsdfImage":
        """Wrap a Pillow image, converting it to RGB."""
        rgb = image.convert("RGB")
        result = cls(rgb.width, rgb.height, max_distance=max_distance)
        result._data[:] = rgb.tobytes()
        return result

    @classmethod
    def load(cls, path: Path, max_distance: float = MAX_DISTANCE) -> "MsdfImage":
        """Read an MSDF image from a file.

        Raises:
            ImageReadError: If the file is missing or not an image
        """
        if not path.exists():
            raise ImageReadError(str(path), "file not found")
        try:
            with Image.open(path) as image:
                return cls.from_pil(image, max_distance=max_distance)
        except OSError as e:
            raise ImageReadError(str(path), str(e)) from e


def render_preview(image: MsdfImage, scale: int = 8, threshold: float = 0.0) -> Image.Image:
    """Reconstruct the outline from an MSDF by thresholding the channel median.

    Every output pixel bilinearly decodes the field at its centre; pixels
    whose median distance exceeds ``threshold`` are white.

    Args:
        image: Encoded distance field
        scale: Upscaling factor
        threshold: Distance in source pixels separating inside from outside

    Returns:
        Grayscale Pillow image of size ``(width * scale, height * scale)``
    """
    width, height = image.width * scale, image.height * scale
    preview = Image.new("L", (width, height))
    pixels = bytearray(width * height)
    for oy in range(height):
        for ox in range(width):
            r, g, b = image.sample_bilinear((ox + 0.5) / scale, (oy + 0.5) / scale)
            if median(r, g, b) > threshold:
                pixels[oy * width + ox] = 255
    preview.frombytes(bytes(pixels))
    return preview
