"""Channel colours for splines.

A colour is a set of output channels (red, green, blue) stored as a 3-bit
value. Splines are tagged with a colour to select which channels of the
distance field they contribute to.
"""

from enum import Enum

_CHANNEL_MASK = 0b111


class Colour(Enum):
    """A subset of the red, green and blue channels.

    The eight members form a closed lattice under ``&``, ``|``, ``^`` and
    ``~``. Results are looked up by value so an out-of-range combination can
    never be produced silently.
    """

    BLACK = 0b000
    RED = 0b001
    GREEN = 0b010
    YELLOW = 0b011
    BLUE = 0b100
    MAGENTA = 0b101
    CYAN = 0b110
    WHITE = 0b111

    def __and__(self, other: "Colour") -> "Colour":
        return Colour(self.value & other.value)

    def __or__(self, other: "Colour") -> "Colour":
        return Colour(self.value | other.value)

    def __xor__(self, other: "Colour") -> "Colour":
        return Colour(self.value ^ other.value)

    def __invert__(self) -> "Colour":
        return Colour(~self.value & _CHANNEL_MASK)

    def has_channel(self, channel: "Colour") -> bool:
        """Check whether every channel of ``channel`` is present."""
        return self & channel == channel

    def channels(self) -> list["Colour"]:
        """Primary channels contained in this colour, in RGB order."""
        return [c for c in CHANNELS if self.has_channel(c)]


# Output order of the distance field
CHANNELS: tuple[Colour, Colour, Colour] = (Colour.RED, Colour.GREEN, Colour.BLUE)
