from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from enum import Enum

from mountain.engine.errors import InvalidConfig
from mountain.engine.palette import Palette


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"

    @classmethod
    def parse(cls, value: "Season | str") -> "Season":
        try:
            return cls(value.lower() if isinstance(value, str) else value)
        except ValueError as exc:
            raise InvalidConfig(f"unknown season: {value!r}") from exc


def season_for(day: date) -> Season:
    """Meteorological season for the northern hemisphere."""

    if 3 <= day.month <= 5:
        return Season.SPRING
    if 6 <= day.month <= 8:
        return Season.SUMMER
    if 9 <= day.month <= 11:
        return Season.AUTUMN
    return Season.WINTER


def select_palette(
    season_palettes: Mapping[str, Sequence[str]],
    season: Season | str,
) -> Palette:
    """Return the validated palette configured for a season.

    Raises:
        InvalidConfig: If no palette is configured for the season.
        InvalidPalette: If the configured palette is empty.
        InvalidColor: If a configured stop is not a valid hex color.
    """

    selected = Season.parse(season)
    hex_stops = season_palettes.get(selected.value)
    if hex_stops is None:
        raise InvalidConfig(f"no palette configured for season {selected.value!r}")
    return Palette.from_hex(hex_stops)
