"""Render a GitHub contribution calendar as a terrain image.

Usage:
    mountain --output profile/mountain.svg
    mountain --user octocat --season winter --scale log
    mountain --format scene --output mountain.json
"""

import argparse
import json
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path

import structlog

from mountain.core.logging import configure_logging
from mountain.core.observability import init_sentry
from mountain.engine.season import Season
from mountain.engine.season import season_for
from mountain.services.mountain_service import RenderOptions
from mountain.services.mountain_service import get_authenticated_user_activity
from mountain.services.mountain_service import get_user_activity
from mountain.services.mountain_service import period_from_settings
from mountain.services.mountain_service import render_mountain_scene
from mountain.services.mountain_service import render_mountain_svg
from mountain.settings import Settings

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mountain",
        description="Render a GitHub contribution calendar as a 3D-looking mountain.",
    )
    parser.add_argument("--user", help="GitHub login (default: the token owner)")
    parser.add_argument(
        "--season",
        choices=[season.value for season in Season],
        help="palette season (default: from today's date)",
    )
    parser.add_argument("--scale", choices=["linear", "log"], help="height scale mode")
    parser.add_argument("--output", help="output file path (default: OUTPUT_PATH setting)")
    parser.add_argument(
        "--format",
        choices=["svg", "scene"],
        default="svg",
        help="write an SVG image or the 3D scene JSON",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace, settings: Settings, today: date) -> Path:
    """Fetch, render and write the mountain; returns the written path."""

    if not settings.github_token:
        raise RuntimeError("GITHUB_TOKEN is not set")

    options = RenderOptions.from_settings(settings).with_overrides(scale_mode=args.scale)
    period = period_from_settings(settings, today)
    login = args.user or settings.github_user

    logger.info(
        "Fetching contributions",
        user=login or "<token owner>",
        start=period[0].isoformat(),
        end=period[1].isoformat(),
    )
    if login:
        grid = get_user_activity(login, settings.github_token, settings.github_graphql_url, period)
    else:
        login, grid = get_authenticated_user_activity(
            settings.github_token, settings.github_graphql_url, period
        )

    season = Season.parse(args.season) if args.season else season_for(today)
    if args.format == "scene":
        scene = render_mountain_scene(grid, options, season)
        content = json.dumps({"season": season.value, **asdict(scene)})
    else:
        content = render_mountain_svg(grid, options, season)

    output = Path(args.output or settings.output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    logger.info(
        "Mountain written",
        user=login,
        season=season.value,
        path=str(output),
        size=len(content.encode("utf-8")),
    )
    return output


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)
    init_sentry(settings, component="cli")

    try:
        run(args, settings, date.today())
    except Exception:
        logger.exception("Mountain render failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
