import re

import pytest

from mountain.engine.emitter import emit
from mountain.engine.emitter import shade_quad
from mountain.engine.normalizer import normalize
from mountain.engine.palette import Palette
from mountain.renderers.scene import build_scene
from mountain.renderers.svg import render_svg

PALETTE = Palette.from_hex(["#0e2a1a", "#39d353", "#fffbe6"])


def test_svg_has_one_polygon_per_face_in_draw_order(peak_grid) -> None:
    draw_list = emit(normalize(peak_grid, "linear"), PALETTE, 800, 400, 20)

    svg = render_svg(draw_list)
    fills = re.findall(r'<polygon points="[^"]+" fill="(#[0-9a-f]{6})"', svg)

    assert svg.startswith('<svg width="800" height="400" viewBox="0 0 800 400"')
    assert svg.rstrip().endswith("</svg>")
    assert '<rect width="100%" height="100%" fill="#0a0a0a" />' in svg
    assert fills == [face.color.to_hex() for face in draw_list.faces]


def test_svg_points_use_two_decimals(peak_grid) -> None:
    draw_list = emit(normalize(peak_grid, "linear"), PALETTE, 800, 400, 20)

    svg = render_svg(draw_list)
    first_terrain = svg.split("<polygon")[2]
    points = re.search(r'points="([^"]+)"', first_terrain).group(1).split()

    assert len(points) == 4
    assert all(re.fullmatch(r"-?\d+\.\d{2},-?\d+\.\d{2}", point) for point in points)
    assert 'stroke-width="0.3"' in first_terrain


def test_ground_polygon_has_no_stroke(make_grid) -> None:
    draw_list = emit(normalize(make_grid([[0] * 7] * 2), "linear"), PALETTE, 640, 320, 10)

    ground = render_svg(draw_list).split("<polygon")[1]

    assert 'fill="#151515"' in ground
    assert "stroke" not in ground.split("/>")[0]


def test_scene_buffers_cover_every_grid_vertex(peak_grid) -> None:
    height_grid = normalize(peak_grid, "linear")

    scene = build_scene(height_grid, PALETTE, max_height_units=20)

    assert scene.vertex_count == 21
    assert len(scene.colors) == 63
    assert len(scene.indices) == 12 * 6
    assert len(scene.face_colors) == 12
    assert max(scene.indices) == 20
    assert scene.background == "#0a0a0a"


def test_scene_positions_are_centered_and_scaled(peak_grid) -> None:
    scene = build_scene(normalize(peak_grid, "linear"), PALETTE, max_height_units=20)

    first = scene.positions[0:3]
    peak_index = 1 * 7 + 3
    peak = scene.positions[peak_index * 3 : peak_index * 3 + 3]

    assert first == [-2.0, 0.0, -6.0]
    assert peak == [0.0, 20.0, 0.0]
    assert scene.colors[peak_index * 3 : peak_index * 3 + 3] == pytest.approx(
        [1.0, 0xFB / 255, 0xE6 / 255]
    )


def test_scene_face_colors_reuse_emitter_shading(peak_grid) -> None:
    height_grid = normalize(peak_grid, "log")

    scene = build_scene(height_grid, PALETTE, max_height_units=20)

    expected = [
        shade_quad(height_grid, PALETTE, w, d).color.to_hex() for w in range(2) for d in range(6)
    ]
    assert scene.face_colors == expected
    assert scene.camera.position == (40.0, 50.0, 80.0)
