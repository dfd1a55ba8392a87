from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import replace
from datetime import date
from datetime import timedelta
from typing import TypeVar

import httpx
import structlog

from mountain.clients.github_client import fetch_authenticated_user
from mountain.clients.github_client import fetch_contribution_calendar
from mountain.engine.emitter import DrawList
from mountain.engine.emitter import emit
from mountain.engine.errors import InvalidConfig
from mountain.engine.models import ActivityDay
from mountain.engine.models import ActivityGrid
from mountain.engine.models import ActivityWeek
from mountain.engine.models import HeightGrid
from mountain.engine.normalizer import ScaleMode
from mountain.engine.normalizer import normalize
from mountain.engine.season import Season
from mountain.engine.season import select_palette
from mountain.renderers.scene import MountainScene
from mountain.renderers.scene import build_scene
from mountain.renderers.svg import render_svg
from mountain.settings import Settings

logger = structlog.get_logger()

T = TypeVar("T")


class InvalidGitHubTokenError(Exception):
    """Raised when GitHub rejects the provided token."""


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail for non-auth reasons."""


@dataclass(frozen=True)
class RenderOptions:
    """Render parameters resolved from settings or request overrides."""

    scale_mode: ScaleMode
    canvas_width: int
    canvas_height: int
    max_height_units: float
    season_palettes: Mapping[str, Sequence[str]]

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderOptions":
        return cls(
            scale_mode=ScaleMode.parse(settings.scale_mode),
            canvas_width=settings.canvas_width,
            canvas_height=settings.canvas_height,
            max_height_units=settings.max_height_units,
            season_palettes=settings.season_palettes,
        )

    def with_overrides(
        self,
        scale_mode: ScaleMode | str | None = None,
        season: Season | str | None = None,
        palette: Sequence[str] | None = None,
    ) -> "RenderOptions":
        """Return a copy with the request-level overrides applied.

        A palette override needs a season to attach to.
        """

        options = self
        if scale_mode is not None:
            options = replace(options, scale_mode=ScaleMode.parse(scale_mode))
        if palette is not None:
            if season is None:
                raise InvalidConfig("a palette override requires a season")
            palettes = dict(options.season_palettes)
            palettes[Season.parse(season).value] = list(palette)
            options = replace(options, season_palettes=palettes)
        return options


def github_weekday(day: date) -> int:
    """Weekday index with Sunday as 0, as GitHub's calendar uses."""

    return (day.weekday() + 1) % 7


def build_activity_grid(
    contribution_days: list[dict[str, str | int]],
    total: int | None = None,
) -> ActivityGrid:
    """Group contribution days into Sunday-start week buckets.

    A `weekday` supplied by the calendar is used as is; otherwise it is
    derived from the date.
    """

    grouped_weeks: dict[date, list[ActivityDay]] = {}

    for item in contribution_days:
        raw_day = item.get("date")
        raw_count = item.get("count")
        if not isinstance(raw_day, str) or not isinstance(raw_count, int) or raw_count < 0:
            continue

        try:
            parsed_day = date.fromisoformat(raw_day)
        except ValueError:
            continue

        raw_weekday = item.get("weekday")
        if isinstance(raw_weekday, int) and 0 <= raw_weekday <= 6:
            weekday = raw_weekday
        else:
            weekday = github_weekday(parsed_day)
        week_start = parsed_day - timedelta(days=weekday)
        grouped_weeks.setdefault(week_start, []).append(
            ActivityDay(date=parsed_day, raw_count=raw_count, weekday=weekday)
        )

    weeks = tuple(
        ActivityWeek(days=tuple(sorted(grouped_weeks[week_start], key=lambda day: day.weekday)))
        for week_start in sorted(grouped_weeks)
    )
    return ActivityGrid(weeks=weeks, total_count=total)


def one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # 29 February has no counterpart in the previous year.
        return day.replace(year=day.year - 1, day=28)


def resolve_period(
    mode: str,
    today: date,
    last_n_days: int = 30,
    custom_from: date | None = None,
    custom_to: date | None = None,
) -> tuple[date, date]:
    """Resolve the configured calendar window to an inclusive date range."""

    if mode == "past_year":
        return one_year_before(today), today

    if mode == "last_n_days":
        if last_n_days <= 0:
            raise InvalidConfig("period_last_n_days must be positive")
        return today - timedelta(days=last_n_days), today

    if mode == "custom":
        if custom_from is None or custom_to is None:
            raise InvalidConfig("custom period requires both period_from and period_to")
        if custom_from > custom_to:
            raise InvalidConfig("period_from must be before or equal to period_to")
        return custom_from, custom_to

    raise InvalidConfig(f"unknown period mode: {mode!r}")


def period_from_settings(settings: Settings, today: date) -> tuple[date, date]:
    return resolve_period(
        settings.period_mode,
        today,
        last_n_days=settings.period_last_n_days,
        custom_from=settings.period_from,
        custom_to=settings.period_to,
    )


def _call_github(request: Callable[..., T], **kwargs: object) -> T:
    try:
        return request(**kwargs)
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code in {401, 403}:
            raise InvalidGitHubTokenError from exc
        raise GitHubAPIError from exc
    except Exception as exc:
        raise GitHubAPIError from exc


def get_user_activity(
    username: str,
    token: str,
    graphql_url: str,
    period: tuple[date, date],
) -> ActivityGrid:
    """Fetch a user's contribution calendar as an activity grid."""

    from_day, to_day = period
    calendar = _call_github(
        fetch_contribution_calendar,
        username=username,
        token=token,
        graphql_url=graphql_url,
        from_day=from_day,
        to_day=to_day,
    )
    grid = build_activity_grid(calendar["days"], total=calendar.get("total"))
    logger.info(
        "Fetched contribution calendar",
        username=username,
        weeks=len(grid.weeks),
        total=grid.total_count,
        max_count=grid.max_count,
    )
    return grid


def get_authenticated_user_activity(
    token: str,
    graphql_url: str,
    period: tuple[date, date],
) -> tuple[str, ActivityGrid]:
    """Resolve the token owner and fetch their activity grid."""

    github_user = _call_github(fetch_authenticated_user, token=token)

    raw_username = github_user.get("login")
    if not isinstance(raw_username, str) or not raw_username:
        raise GitHubAPIError("GitHub user response is invalid")
    username = raw_username.lower()

    return username, get_user_activity(username, token, graphql_url, period)


def render_height_grid(grid: ActivityGrid, options: RenderOptions) -> HeightGrid:
    return normalize(grid, options.scale_mode)


def render_draw_list(grid: ActivityGrid, options: RenderOptions, season: Season | str) -> DrawList:
    """Normalize, pick the season palette and emit the shaded faces."""

    palette = select_palette(options.season_palettes, season)
    height_grid = render_height_grid(grid, options)
    draw_list = emit(
        height_grid,
        palette,
        canvas_width=options.canvas_width,
        canvas_height=options.canvas_height,
        max_height_units=options.max_height_units,
    )
    logger.info(
        "Rendered mountain",
        season=Season.parse(season).value,
        scale_mode=options.scale_mode.value,
        weeks=height_grid.num_weeks,
        faces=len(draw_list),
    )
    return draw_list


def render_mountain_svg(grid: ActivityGrid, options: RenderOptions, season: Season | str) -> str:
    return render_svg(render_draw_list(grid, options, season))


def render_mountain_scene(
    grid: ActivityGrid, options: RenderOptions, season: Season | str
) -> MountainScene:
    palette = select_palette(options.season_palettes, season)
    height_grid = render_height_grid(grid, options)
    scene = build_scene(height_grid, palette, options.max_height_units)
    logger.info(
        "Built mountain scene",
        season=Season.parse(season).value,
        vertices=scene.vertex_count,
        triangles=len(scene.indices) // 3,
    )
    return scene
