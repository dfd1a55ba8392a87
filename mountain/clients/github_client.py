from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx

USER_AGENT = "contrib-mountain"

CALENDAR_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
            weekday
          }
        }
      }
    }
  }
}
"""


def fetch_authenticated_user(token: str) -> dict[str, str | int]:
    """Fetch basic profile data for the token owner from GitHub REST API."""

    response = httpx.get(
        "https://api.github.com/user",
        headers={
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        },
        timeout=15.0,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub user response is invalid")

    raw_id = payload.get("id")
    raw_login = payload.get("login")
    if not isinstance(raw_id, int) or not isinstance(raw_login, str) or not raw_login:
        raise ValueError("GitHub user response is missing required fields")

    return {"id": raw_id, "login": raw_login}


def _require_mapping(parent: Mapping, key: str, message: str) -> Mapping:
    value = parent.get(key)
    if not isinstance(value, Mapping):
        raise ValueError(message)
    return value


def parse_contribution_calendar(payload: Any) -> dict[str, object]:
    """Validate a GraphQL calendar response and flatten its days."""

    if not isinstance(payload, Mapping):
        raise ValueError("GitHub GraphQL response is invalid")

    if payload.get("errors"):
        raise ValueError("GitHub GraphQL returned errors")

    data = _require_mapping(payload, "data", "GitHub GraphQL data is missing")
    user = _require_mapping(data, "user", "GitHub user not found")
    collection = _require_mapping(
        user, "contributionsCollection", "GitHub contributionsCollection is missing"
    )
    calendar = _require_mapping(
        collection, "contributionCalendar", "GitHub contributionCalendar is missing"
    )

    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise ValueError("GitHub contribution weeks are missing")

    days: list[dict[str, str | int]] = []
    for week in weeks:
        if not isinstance(week, Mapping):
            continue
        contribution_days = week.get("contributionDays")
        if not isinstance(contribution_days, list):
            continue
        for item in contribution_days:
            if not isinstance(item, Mapping):
                continue
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            raw_weekday = item.get("weekday")
            if not isinstance(raw_date, str) or not isinstance(raw_count, int):
                continue
            day: dict[str, str | int] = {"date": raw_date, "count": raw_count}
            if isinstance(raw_weekday, int):
                day["weekday"] = raw_weekday
            days.append(day)

    raw_total = calendar.get("totalContributions")
    total = raw_total if isinstance(raw_total, int) else sum(int(day["count"]) for day in days)
    return {"total": total, "days": days}


def fetch_contribution_calendar(
    username: str,
    token: str,
    graphql_url: str,
    from_day: date,
    to_day: date,
) -> dict[str, object]:
    """Fetch the contribution calendar of a user from GitHub GraphQL API."""

    if not token:
        raise ValueError("GITHUB_TOKEN is required for GraphQL requests")

    variables = {
        "login": username,
        "from": f"{from_day.isoformat()}T00:00:00Z",
        "to": f"{to_day.isoformat()}T23:59:59Z",
    }
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }

    response = httpx.post(
        graphql_url,
        json={"query": CALENDAR_QUERY, "variables": variables},
        headers=headers,
        timeout=20.0,
    )
    response.raise_for_status()

    return parse_contribution_calendar(response.json())
