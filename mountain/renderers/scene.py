"""Mesh payload for a hosted 3D renderer.

The host applies its own perspective camera, so vertex positions come
straight from the height grid rather than from the oblique projector. Colors
reuse the palette and the emitter's per-quad shading.
"""

from dataclasses import dataclass
from dataclasses import field

from mountain.engine.emitter import SceneStyle
from mountain.engine.emitter import iter_quads
from mountain.engine.emitter import shade_quad
from mountain.engine.models import HeightGrid
from mountain.engine.palette import Palette
from mountain.engine.palette import interpolate

CELL_SIZE = 2.0


@dataclass(frozen=True)
class SceneCamera:
    fov: float = 45.0
    near: float = 0.1
    far: float = 1000.0
    position: tuple[float, float, float] = (40.0, 50.0, 80.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class SceneLighting:
    ambient_intensity: float = 0.4
    directional_intensity: float = 0.8
    directional_position: tuple[float, float, float] = (50.0, 100.0, 50.0)


@dataclass(frozen=True)
class MountainScene:
    """Flat buffers ready to upload to a 3D scene host.

    `positions` and `colors` hold three floats per vertex, vertex
    `week * num_days + day`. `indices` holds two triangles per quad and
    `face_colors` one shaded hex color per quad, both in emitter order.
    """

    num_weeks: int
    num_days: int
    positions: list[float]
    colors: list[float]
    indices: list[int]
    face_colors: list[str]
    background: str
    camera: SceneCamera = field(default_factory=SceneCamera)
    lighting: SceneLighting = field(default_factory=SceneLighting)

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3


def build_scene(
    height_grid: HeightGrid,
    palette: Palette,
    max_height_units: float,
    style: SceneStyle = SceneStyle(),
) -> MountainScene:
    num_weeks = height_grid.num_weeks
    num_days = height_grid.num_days
    offset_x = (num_weeks - 1) * CELL_SIZE / 2
    offset_z = (num_days - 1) * CELL_SIZE / 2

    positions: list[float] = []
    colors: list[float] = []
    for week_index in range(num_weeks):
        for day_index in range(num_days):
            height = height_grid.height_at(week_index, day_index)
            positions.extend(
                (
                    week_index * CELL_SIZE - offset_x,
                    height * max_height_units,
                    day_index * CELL_SIZE - offset_z,
                )
            )
            colors.extend(interpolate(palette, height).as_unit_floats())

    indices: list[int] = []
    face_colors: list[str] = []
    for week_index, day_index in iter_quads(height_grid):
        a = week_index * num_days + day_index
        b = (week_index + 1) * num_days + day_index
        c = b + 1
        d = a + 1
        indices.extend((a, b, d, b, c, d))
        face_colors.append(shade_quad(height_grid, palette, week_index, day_index).color.to_hex())

    return MountainScene(
        num_weeks=num_weeks,
        num_days=num_days,
        positions=positions,
        colors=colors,
        indices=indices,
        face_colors=face_colors,
        background=style.background.to_hex(),
    )
