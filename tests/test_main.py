from datetime import date

import pytest
from fastapi.testclient import TestClient

from mountain.api.routes.mountain import get_settings
from mountain.main import app
from mountain.services.mountain_service import GitHubAPIError
from mountain.services.mountain_service import InvalidGitHubTokenError
from mountain.services.mountain_service import build_activity_grid
from mountain.settings import Settings

AUTH = {"Authorization": "Bearer gho_test"}


def posted_days(counts: list[int]) -> list[dict[str, str | int]]:
    start = date(2024, 1, 7).toordinal()
    return [
        {"date": date.fromordinal(start + offset).isoformat(), "count": count}
        for offset, count in enumerate(counts)
    ]


@pytest.fixture
def client() -> TestClient:
    app.dependency_overrides[get_settings] = lambda: Settings(
        scale_mode="linear", canvas_width=800, canvas_height=400
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def fake_activity(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get_activity(token: str, graphql_url: str, period):
        assert token == "gho_test"
        return "octocat", build_activity_grid(posted_days([0, 3, 0, 9, 1, 0, 0] * 3))

    monkeypatch.setattr(
        "mountain.api.routes.mountain.get_authenticated_user_activity", fake_get_activity
    )


def test_read_root_returns_hello_world(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Hello World"}


def test_health_live_returns_ok(client: TestClient) -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_posted_calendar_renders_svg(client: TestClient) -> None:
    response = client.post(
        "/mountain/svg",
        json={"days": posted_days([1, 2, 3, 4, 5, 6, 7] * 3), "season": "winter"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.startswith("<svg")
    assert response.text.count("<polygon") >= 1 + 12


def test_posted_calendar_with_palette_override(client: TestClient) -> None:
    response = client.post(
        "/mountain/svg",
        json={
            "days": posted_days([0] * 14),
            "season": "summer",
            "palette": ["#123456"],
        },
    )

    assert response.status_code == 200
    assert 'fill="#123456"' in response.text


def test_posted_calendar_renders_scene(client: TestClient) -> None:
    response = client.post(
        "/mountain/scene",
        json={"days": posted_days([5] * 14), "season": "spring", "scale": "log"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["season"] == "spring"
    assert body["num_weeks"] == 2
    assert len(body["positions"]) == 2 * 7 * 3
    assert len(body["face_colors"]) == 6
    assert body["camera"]["fov"] == 45.0


@pytest.mark.parametrize(
    "overrides",
    [{"scale": "cubic"}, {"season": "monsoon"}, {"palette": []}, {"palette": ["#xyz"]}],
)
def test_posted_calendar_rejects_invalid_options(client: TestClient, overrides) -> None:
    response = client.post("/mountain/svg", json={"days": posted_days([1] * 7), **overrides})

    assert response.status_code == 422


def test_posted_calendar_rejects_negative_counts(client: TestClient) -> None:
    response = client.post("/mountain/svg", json={"days": [{"date": "2024-01-07", "count": -1}]})

    assert response.status_code == 422


def test_mountain_svg_requires_bearer_token(client: TestClient) -> None:
    response = client.get("/mountain/me.svg")

    assert response.status_code == 401
    assert response.json() == {"detail": "Authorization Bearer token is required"}


def test_mountain_svg_for_authenticated_user(client: TestClient, fake_activity) -> None:
    response = client.get("/mountain/me.svg?season=autumn", headers=AUTH)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.count("<polygon") >= 1 + 2 * 6


def test_mountain_scene_for_authenticated_user(client: TestClient, fake_activity) -> None:
    response = client.get("/mountain/me/scene?season=winter", headers=AUTH)

    assert response.status_code == 200
    assert response.json()["num_weeks"] == 3
    assert len(response.json()["indices"]) == 2 * 6 * 6


def test_heights_for_authenticated_user(client: TestClient, fake_activity) -> None:
    response = client.get("/mountain/me/heights?scale=linear", headers=AUTH)

    body = response.json()
    assert response.status_code == 200
    assert body["username"] == "octocat"
    assert body["max_count"] == 9
    assert body["total"] == 39
    assert body["weeks"][0]["days"][3] == {
        "date": "2024-01-10",
        "weekday": 3,
        "count": 9,
        "height": 1.0,
    }


def test_invalid_query_override_returns_422(client: TestClient, fake_activity) -> None:
    response = client.get("/mountain/me.svg?scale=cubic", headers=AUTH)

    assert response.status_code == 422


def test_invalid_server_settings_return_500(fake_activity) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(scale_mode="cubic")
    try:
        with TestClient(app) as test_client:
            response = test_client.get("/mountain/me.svg", headers=AUTH)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "render configuration is invalid"}


@pytest.mark.parametrize(
    ("error", "status_code", "detail"),
    [
        (InvalidGitHubTokenError, 401, "GitHub token is invalid"),
        (GitHubAPIError, 502, "GitHub API request failed"),
    ],
)
def test_github_failures_map_to_http_errors(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
    error: type[Exception],
    status_code: int,
    detail: str,
) -> None:
    def failing_get_activity(token: str, graphql_url: str, period):
        raise error

    monkeypatch.setattr(
        "mountain.api.routes.mountain.get_authenticated_user_activity", failing_get_activity
    )

    response = client.get("/mountain/me.svg", headers=AUTH)

    assert response.status_code == status_code
    assert response.json() == {"detail": detail}
