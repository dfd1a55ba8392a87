from dataclasses import asdict
from datetime import date

import structlog
from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Response

from mountain.api.schemas.mountain import HeightDay
from mountain.api.schemas.mountain import HeightGridResponse
from mountain.api.schemas.mountain import HeightWeek
from mountain.api.schemas.mountain import MountainSceneResponse
from mountain.api.schemas.mountain import RenderRequest
from mountain.core.security import github_token
from mountain.engine.errors import MountainError
from mountain.engine.models import ActivityGrid
from mountain.engine.models import HeightGrid
from mountain.engine.season import Season
from mountain.engine.season import season_for
from mountain.renderers.scene import MountainScene
from mountain.services.mountain_service import GitHubAPIError
from mountain.services.mountain_service import InvalidGitHubTokenError
from mountain.services.mountain_service import RenderOptions
from mountain.services.mountain_service import build_activity_grid
from mountain.services.mountain_service import get_authenticated_user_activity
from mountain.services.mountain_service import period_from_settings
from mountain.services.mountain_service import render_height_grid
from mountain.services.mountain_service import render_mountain_scene
from mountain.services.mountain_service import render_mountain_svg
from mountain.settings import Settings

SVG_MEDIA_TYPE = "image/svg+xml"

logger = structlog.get_logger()
router = APIRouter()


def get_settings() -> Settings:
    return Settings()


def server_options(settings: Settings) -> RenderOptions:
    try:
        return RenderOptions.from_settings(settings)
    except MountainError as exc:
        logger.error("Invalid render settings", error=str(exc))
        raise HTTPException(status_code=500, detail="render configuration is invalid") from exc


def load_user_activity(token: str, settings: Settings) -> tuple[str, ActivityGrid]:
    try:
        period = period_from_settings(settings, date.today())
    except MountainError as exc:
        logger.error("Invalid period settings", error=str(exc))
        raise HTTPException(status_code=500, detail="render configuration is invalid") from exc

    try:
        return get_authenticated_user_activity(
            token=token,
            graphql_url=settings.github_graphql_url,
            period=period,
        )
    except InvalidGitHubTokenError as exc:
        raise HTTPException(status_code=401, detail="GitHub token is invalid") from exc
    except GitHubAPIError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc


def resolve_season(season: str | None) -> Season:
    if season is None:
        return season_for(date.today())
    return Season.parse(season)


def scene_response(scene: MountainScene, season: Season) -> MountainSceneResponse:
    return MountainSceneResponse(season=season.value, **asdict(scene))


def height_grid_response(
    height_grid: HeightGrid, options: RenderOptions, username: str | None = None
) -> HeightGridResponse:
    return HeightGridResponse(
        username=username,
        total=height_grid.total_count,
        max_count=height_grid.max_count,
        scale_mode=options.scale_mode.value,
        weeks=[
            HeightWeek(
                days=[
                    HeightDay(
                        date=cell.day.date,
                        weekday=cell.weekday,
                        count=cell.day.raw_count,
                        height=cell.height,
                    )
                    for cell in week
                ]
            )
            for week in height_grid.weeks
        ],
    )


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Hello World"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/mountain/me.svg")
def get_authenticated_user_mountain_svg(
    season: str | None = Query(default=None),
    scale: str | None = Query(default=None),
    token: str = Depends(github_token),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Render the token owner's contribution mountain as SVG."""

    options = server_options(settings)
    _, grid = load_user_activity(token, settings)

    try:
        selected = resolve_season(season)
        svg = render_mountain_svg(grid, options.with_overrides(scale_mode=scale), selected)
    except MountainError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return Response(content=svg, media_type=SVG_MEDIA_TYPE)


@router.get("/mountain/me/scene", response_model=MountainSceneResponse)
def get_authenticated_user_mountain_scene(
    season: str | None = Query(default=None),
    scale: str | None = Query(default=None),
    token: str = Depends(github_token),
    settings: Settings = Depends(get_settings),
) -> MountainSceneResponse:
    """Return mesh buffers of the token owner's mountain for a 3D host."""

    options = server_options(settings)
    _, grid = load_user_activity(token, settings)

    try:
        selected = resolve_season(season)
        scene = render_mountain_scene(grid, options.with_overrides(scale_mode=scale), selected)
    except MountainError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return scene_response(scene, selected)


@router.get("/mountain/me/heights", response_model=HeightGridResponse)
def get_authenticated_user_heights(
    scale: str | None = Query(default=None),
    token: str = Depends(github_token),
    settings: Settings = Depends(get_settings),
) -> HeightGridResponse:
    """Return the normalized height grid of the token owner."""

    options = server_options(settings)
    username, grid = load_user_activity(token, settings)

    try:
        options = options.with_overrides(scale_mode=scale)
        height_grid = render_height_grid(grid, options)
    except MountainError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return height_grid_response(height_grid, options, username=username)


def _posted_render_inputs(
    payload: RenderRequest, settings: Settings
) -> tuple[ActivityGrid, RenderOptions, Season]:
    options = server_options(settings)
    grid = build_activity_grid(
        [{"date": day.date.isoformat(), "count": day.count} for day in payload.days],
        total=payload.total,
    )
    try:
        selected = resolve_season(payload.season)
        options = options.with_overrides(
            scale_mode=payload.scale,
            season=selected,
            palette=payload.palette,
        )
    except MountainError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return grid, options, selected


@router.post("/mountain/svg")
def render_posted_calendar_svg(
    payload: RenderRequest, settings: Settings = Depends(get_settings)
) -> Response:
    """Render a posted calendar as SVG."""

    grid, options, selected = _posted_render_inputs(payload, settings)
    try:
        svg = render_mountain_svg(grid, options, selected)
    except MountainError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return Response(content=svg, media_type=SVG_MEDIA_TYPE)


@router.post("/mountain/scene", response_model=MountainSceneResponse)
def render_posted_calendar_scene(
    payload: RenderRequest, settings: Settings = Depends(get_settings)
) -> MountainSceneResponse:
    """Build 3D scene buffers for a posted calendar."""

    grid, options, selected = _posted_render_inputs(payload, settings)
    try:
        scene = render_mountain_scene(grid, options, selected)
    except MountainError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return scene_response(scene, selected)
