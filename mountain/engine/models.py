from dataclasses import dataclass
from dataclasses import field
from datetime import date

from mountain.engine.errors import InvalidActivity

NUM_DAYS = 7
LAST_WEEKDAY = 6


@dataclass(frozen=True)
class ActivityDay:
    """Single calendar day with its raw contribution count.

    `weekday` follows GitHub's calendar: 0 is Sunday and 6 is Saturday.
    """

    date: date
    raw_count: int
    weekday: int

    def __post_init__(self) -> None:
        if not isinstance(self.raw_count, int) or self.raw_count < 0:
            raise InvalidActivity(f"contribution count must be non-negative: {self.raw_count!r}")
        if not isinstance(self.weekday, int) or not 0 <= self.weekday <= LAST_WEEKDAY:
            raise InvalidActivity(f"weekday out of range: {self.weekday!r}")


@dataclass(frozen=True)
class ActivityWeek:
    """Week bucket holding up to seven days in weekday order."""

    days: tuple[ActivityDay, ...]


@dataclass(frozen=True)
class ActivityGrid:
    """Date-ascending weeks of activity plus summary counts."""

    weeks: tuple[ActivityWeek, ...]
    total_count: int | None = None
    max_count: int = field(init=False)

    def __post_init__(self) -> None:
        counts = [day.raw_count for week in self.weeks for day in week.days]
        object.__setattr__(self, "max_count", max([*counts, 0]))
        if self.total_count is None:
            object.__setattr__(self, "total_count", sum(counts))

    def days(self) -> list[ActivityDay]:
        return [day for week in self.weeks for day in week.days]


@dataclass(frozen=True)
class HeightCell:
    """Activity day augmented with its normalized height in [0, 1]."""

    day: ActivityDay
    height: float

    @property
    def weekday(self) -> int:
        return self.day.weekday


@dataclass(frozen=True)
class HeightGrid:
    """Normalized heightfield with the same week/day nesting as the calendar."""

    weeks: tuple[tuple[HeightCell, ...], ...]
    max_count: int = 0
    total_count: int = 0

    @property
    def num_weeks(self) -> int:
        return len(self.weeks)

    @property
    def num_days(self) -> int:
        return NUM_DAYS

    def height_at(self, week_index: int, day_index: int) -> float:
        """Return the height of a week's cell for a weekday, 0.0 when absent.

        `day_index` is the weekday slot, so a gap inside a week leaves its
        own slot empty instead of shifting later days.
        """

        if not 0 <= week_index < len(self.weeks):
            return 0.0
        for cell in self.weeks[week_index]:
            if cell.weekday == day_index:
                return cell.height
        return 0.0
