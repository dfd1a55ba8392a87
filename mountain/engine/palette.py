import math
import re
from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass

from mountain.engine.errors import InvalidColor
from mountain.engine.errors import InvalidPalette

HEX_PATTERN = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
MAX_PACKED = 0xFFFFFF


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""

    return math.floor(value + 0.5)


def clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


@dataclass(frozen=True)
class Color:
    """RGB color with integer channels in 0..255."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not isinstance(channel, int) or not 0 <= channel <= 255:
                raise InvalidColor(f"color channel out of range: {channel!r}")

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse `#rrggbb` (the leading `#` is optional, case-insensitive)."""

        if not isinstance(value, str):
            raise InvalidColor(f"color must be a hex string, got {value!r}")
        match = HEX_PATTERN.match(value.strip())
        if match is None:
            raise InvalidColor(f"invalid hex color: {value!r}")
        r, g, b = (int(group, 16) for group in match.groups())
        return cls(r, g, b)

    @classmethod
    def from_packed(cls, value: int) -> "Color":
        if not isinstance(value, int) or not 0 <= value <= MAX_PACKED:
            raise InvalidColor(f"packed color out of range: {value!r}")
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @property
    def packed(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b

    def to_hex(self) -> str:
        return f"#{self.packed:06x}"

    def as_unit_floats(self) -> tuple[float, float, float]:
        return (self.r / 255, self.g / 255, self.b / 255)

    def scaled(self, factor: float) -> "Color":
        """Multiply every channel by `factor` and clamp back into 0..255."""

        return Color(
            clamp_channel(self.r * factor),
            clamp_channel(self.g * factor),
            clamp_channel(self.b * factor),
        )


@dataclass(frozen=True)
class Palette:
    """Ordered, non-empty list of gradient color stops."""

    stops: tuple[Color, ...]

    def __post_init__(self) -> None:
        if len(self.stops) == 0:
            raise InvalidPalette("palette must contain at least one color stop")

    @classmethod
    def from_hex(cls, values: Iterable[str]) -> "Palette":
        return cls(tuple(Color.from_hex(value) for value in values))

    def __len__(self) -> int:
        return len(self.stops)

    def __getitem__(self, index: int) -> Color:
        return self.stops[index]

    @property
    def first(self) -> Color:
        return self.stops[0]

    @property
    def last(self) -> Color:
        return self.stops[-1]


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def interpolate(palette: Palette | Sequence[Color], x: float) -> Color:
    """Map a normalized scalar onto the palette gradient.

    `x` is clamped into [0, 1]. The endpoints return the first and last stop
    unchanged; in between, each channel is interpolated linearly between the
    two neighbouring stops and rounded to the nearest integer.
    """

    stops = palette.stops if isinstance(palette, Palette) else tuple(palette)
    count = len(stops)
    if count == 0:
        raise InvalidPalette("palette must contain at least one color stop")
    if count == 1:
        return stops[0]

    x = max(0.0, min(1.0, x))
    position = x * (count - 1)
    index = math.floor(position)
    t = position - index

    start = stops[index]
    end = stops[min(index + 1, count - 1)]
    if t == 0:
        return start

    return Color(
        clamp_channel(lerp(start.r, end.r, t)),
        clamp_channel(lerp(start.g, end.g, t)),
        clamp_channel(lerp(start.b, end.b, t)),
    )
