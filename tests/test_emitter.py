import pytest

from mountain.engine.emitter import FaceKind
from mountain.engine.emitter import SceneStyle
from mountain.engine.emitter import emit
from mountain.engine.emitter import shade_quad
from mountain.engine.normalizer import normalize
from mountain.engine.palette import Color
from mountain.engine.palette import Palette
from mountain.engine.projector import Projector

PALETTE = Palette.from_hex(["#646464", "#39d353", "#ffffff"])
CANVAS = {"canvas_width": 800, "canvas_height": 400, "max_height_units": 20}


def test_flat_grid_uses_first_palette_stop_everywhere(make_grid) -> None:
    height_grid = normalize(make_grid([[0] * 7 for _ in range(3)]), "linear")

    draw_list = emit(height_grid, PALETTE, **CANVAS)

    assert len(draw_list) == 1 + 2 * 6
    assert draw_list.faces[0].kind is FaceKind.GROUND
    assert draw_list.faces[0].color == SceneStyle().ground
    assert [face.color for face in draw_list.terrain_faces()] == [PALETTE.first] * 12
    assert not [face for face in draw_list.faces if face.kind is FaceKind.SKIRT]


def test_terrain_faces_follow_ascending_week_then_day_order(peak_grid) -> None:
    height_grid = normalize(peak_grid, "linear")
    projector = Projector(height_grid.num_weeks, 800, 400, 20)

    terrain = emit(height_grid, PALETTE, **CANVAS).terrain_faces()

    origins = [(w, d) for w in range(2) for d in range(6)]
    assert len(terrain) == len(origins)
    for face, (w, d) in zip(terrain, origins):
        assert face.vertices[0] == projector.project(w, d, height_grid.height_at(w, d))
        assert face.vertices[2] == projector.project(
            w + 1, d + 1, height_grid.height_at(w + 1, d + 1)
        )


def test_peak_shading_is_brighter_uphill_and_darker_opposite(peak_grid) -> None:
    height_grid = normalize(peak_grid, "linear")

    rising_day = shade_quad(height_grid, PALETTE, 1, 2)
    rising_week = shade_quad(height_grid, PALETTE, 0, 3)
    falling = shade_quad(height_grid, PALETTE, 1, 3)

    assert height_grid.height_at(1, 3) == 1.0
    assert rising_day.brightness == pytest.approx(1.5)
    assert rising_week.brightness == pytest.approx(0.7)
    assert falling.brightness == pytest.approx(0.8)
    assert rising_day.average_height == pytest.approx(0.25)
    assert rising_day.color == rising_day.base_color.scaled(1.5)


def test_emit_is_deterministic(peak_grid) -> None:
    height_grid = normalize(peak_grid, "log")

    first = emit(height_grid, PALETTE, **CANVAS)
    second = emit(height_grid, PALETTE, **CANVAS)

    assert first == second


def test_skirts_hang_from_non_zero_boundary_edges(make_grid) -> None:
    weeks = [[0] * 7 for _ in range(3)]
    weeks[2][3] = 10
    height_grid = normalize(make_grid(weeks), "linear")
    projector = Projector(3, 800, 400, 20)

    draw_list = emit(height_grid, PALETTE, **CANVAS)
    skirts = [face for face in draw_list.faces if face.kind is FaceKind.SKIRT]

    assert len(skirts) == 2
    assert draw_list.faces[-2:] == tuple(skirts)
    assert all(face.color == Color(60, 60, 60) for face in skirts)
    assert skirts[0].vertices[1] == projector.project(2, 3, 1.0)
    assert skirts[0].vertices[2] == projector.project(2, 3, 0)


def test_short_trailing_week_reads_as_zero_height(make_grid) -> None:
    height_grid = normalize(make_grid([[4] * 7, [4] * 7, [4, 4]]), "linear")

    draw_list = emit(height_grid, PALETTE, **CANVAS)

    assert len(draw_list.terrain_faces()) == 12
    missing = shade_quad(height_grid, PALETTE, 1, 4)
    assert (missing.h10, missing.h11) == (0.0, 0.0)


def test_single_week_grid_emits_only_ground(make_grid) -> None:
    height_grid = normalize(make_grid([[1] * 7]), "linear")

    draw_list = emit(height_grid, PALETTE, **CANVAS)

    assert [face.kind for face in draw_list.faces] == [FaceKind.GROUND]


def test_degenerate_faces_are_still_emitted(make_grid) -> None:
    height_grid = normalize(make_grid([[5] * 7 for _ in range(2)]), "linear")

    terrain = emit(height_grid, PALETTE, **CANVAS).terrain_faces()

    assert len(terrain) == 6
    assert all(face.color == PALETTE.last for face in terrain)
