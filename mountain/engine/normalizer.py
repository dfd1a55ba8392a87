import math
from enum import Enum

from mountain.engine.errors import InvalidConfig
from mountain.engine.models import ActivityGrid
from mountain.engine.models import HeightCell
from mountain.engine.models import HeightGrid

LOG_SENSITIVITY = 10


class ScaleMode(str, Enum):
    LINEAR = "linear"
    LOG = "log"

    @classmethod
    def parse(cls, value: "ScaleMode | str") -> "ScaleMode":
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidConfig(f"unknown scale mode: {value!r}") from exc


def scale_count(count: int, max_count: int, mode: ScaleMode) -> float:
    """Map a raw count onto [0, 1] relative to `max_count`.

    Log mode compresses the dynamic range so that small non-zero counts stay
    visibly above the baseline.
    """

    if max_count <= 0:
        return 0.0
    if mode is ScaleMode.LOG:
        return math.log(1 + LOG_SENSITIVITY * count) / math.log(1 + LOG_SENSITIVITY * max_count)
    return count / max_count


def normalize(grid: ActivityGrid, mode: ScaleMode | str = ScaleMode.LINEAR) -> HeightGrid:
    """Derive a height grid from raw activity counts."""

    scale_mode = ScaleMode.parse(mode)
    max_count = grid.max_count

    # One height week per source week keeps the calendar's boundaries even
    # when a week has no Saturday.
    weeks = tuple(
        tuple(
            HeightCell(day=day, height=scale_count(day.raw_count, max_count, scale_mode))
            for day in week.days
        )
        for week in grid.weeks
    )

    return HeightGrid(
        weeks=weeks,
        max_count=max_count,
        total_count=grid.total_count or 0,
    )
