from collections.abc import Callable
from datetime import date
from datetime import timedelta

import pytest

from mountain.engine.models import ActivityDay
from mountain.engine.models import ActivityGrid
from mountain.engine.models import ActivityWeek

# 2024-01-07 is a Sunday, the first weekday of a GitHub calendar week.
FIRST_SUNDAY = date(2024, 1, 7)


def grid_from_counts(
    weeks: list[list[int]], start: date = FIRST_SUNDAY, first_weekday: int = 0
) -> ActivityGrid:
    """Build a grid whose first week starts at `first_weekday`."""

    built_weeks = []
    current = start
    for week_index, counts in enumerate(weeks):
        offset = first_weekday if week_index == 0 else 0
        days = []
        for position, count in enumerate(counts):
            days.append(ActivityDay(date=current, raw_count=count, weekday=offset + position))
            current += timedelta(days=1)
        built_weeks.append(ActivityWeek(days=tuple(days)))
    return ActivityGrid(weeks=tuple(built_weeks))


@pytest.fixture
def make_grid() -> Callable[..., ActivityGrid]:
    return grid_from_counts


@pytest.fixture
def peak_grid() -> ActivityGrid:
    """Three full weeks with a single day of 100 contributions at (1, 3)."""

    weeks = [[0] * 7 for _ in range(3)]
    weeks[1][3] = 100
    return grid_from_counts(weeks)
