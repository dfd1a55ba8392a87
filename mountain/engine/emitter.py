"""Walks a height grid and emits shaded faces in painter's order.

Draw order is the only occlusion mechanism: the ground comes first, then the
terrain quads in ascending week and day order, then the boundary skirts.
The nested ascending traversal is a heuristic back-to-front order for the
fixed camera and does not guarantee correct occlusion for every heightfield.
Keep it as is; a depth-keyed sort would change the rendered output.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from mountain.engine.models import HeightGrid
from mountain.engine.palette import Color
from mountain.engine.palette import Palette
from mountain.engine.palette import interpolate
from mountain.engine.projector import ProjectedVertex
from mountain.engine.projector import ProjectionParams
from mountain.engine.projector import Projector
from mountain.engine.shading import apply_shading
from mountain.engine.shading import shade_factor


class FaceKind(str, Enum):
    GROUND = "ground"
    TERRAIN = "terrain"
    SKIRT = "skirt"


@dataclass(frozen=True)
class SceneStyle:
    background: Color = Color(0x0A, 0x0A, 0x0A)
    ground: Color = Color(0x15, 0x15, 0x15)
    skirt_shade: float = 0.6


@dataclass(frozen=True)
class Face:
    """Quad in screen space, wound p00, p10, p11, p01, with one fill color."""

    vertices: tuple[ProjectedVertex, ProjectedVertex, ProjectedVertex, ProjectedVertex]
    color: Color
    kind: FaceKind = FaceKind.TERRAIN


@dataclass(frozen=True)
class DrawList:
    width: float
    height: float
    background: Color
    faces: tuple[Face, ...]

    def __len__(self) -> int:
        return len(self.faces)

    def terrain_faces(self) -> list[Face]:
        return [face for face in self.faces if face.kind is FaceKind.TERRAIN]


@dataclass(frozen=True)
class QuadShade:
    """Heights and resolved color of one grid quad, independent of projection."""

    h00: float
    h10: float
    h11: float
    h01: float
    base_color: Color
    brightness: float
    color: Color

    @property
    def average_height(self) -> float:
        return (self.h00 + self.h10 + self.h11 + self.h01) / 4


def shade_quad(height_grid: HeightGrid, palette: Palette, week_index: int, day_index: int) -> QuadShade:
    """Resolve the display color for the quad whose origin is (week, day)."""

    h00 = height_grid.height_at(week_index, day_index)
    h10 = height_grid.height_at(week_index + 1, day_index)
    h11 = height_grid.height_at(week_index + 1, day_index + 1)
    h01 = height_grid.height_at(week_index, day_index + 1)

    average = (h00 + h10 + h11 + h01) / 4
    base_color = interpolate(palette, average)
    brightness = shade_factor(h00, h10, h01)
    return QuadShade(
        h00=h00,
        h10=h10,
        h11=h11,
        h01=h01,
        base_color=base_color,
        brightness=brightness,
        color=apply_shading(base_color, brightness),
    )


def iter_quads(height_grid: HeightGrid) -> Iterator[tuple[int, int]]:
    """Yield quad origins in draw order."""

    for week_index in range(height_grid.num_weeks - 1):
        for day_index in range(height_grid.num_days - 1):
            yield week_index, day_index


def ground_face(projector: Projector, num_weeks: int, num_days: int, color: Color) -> Face:
    last_week = max(0, num_weeks - 1)
    last_day = num_days - 1
    return Face(
        (
            projector.project(0, 0, 0),
            projector.project(last_week, 0, 0),
            projector.project(last_week, last_day, 0),
            projector.project(0, last_day, 0),
        ),
        color,
        FaceKind.GROUND,
    )


def skirt_faces(height_grid: HeightGrid, projector: Projector, color: Color) -> list[Face]:
    """Vertical fillers hanging from the last-week and last-day boundary edges."""

    last_week = height_grid.num_weeks - 1
    last_day = height_grid.num_days - 1
    edges: list[tuple[tuple[int, int], tuple[int, int]]] = []
    edges.extend(((last_week, d), (last_week, d + 1)) for d in range(last_day))
    edges.extend(((w, last_day), (w + 1, last_day)) for w in range(last_week))

    faces = []
    for (wa, da), (wb, db) in edges:
        top_a = height_grid.height_at(wa, da)
        top_b = height_grid.height_at(wb, db)
        if top_a == 0 and top_b == 0:
            continue
        faces.append(
            Face(
                (
                    projector.project(wa, da, top_a),
                    projector.project(wb, db, top_b),
                    projector.project(wb, db, 0),
                    projector.project(wa, da, 0),
                ),
                color,
                FaceKind.SKIRT,
            )
        )
    return faces


def emit(
    height_grid: HeightGrid,
    palette: Palette,
    canvas_width: float,
    canvas_height: float,
    max_height_units: float,
    params: ProjectionParams = ProjectionParams(),
    style: SceneStyle = SceneStyle(),
) -> DrawList:
    """Build the ordered draw list for a height grid."""

    projector = Projector(
        num_weeks=height_grid.num_weeks,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        max_height_units=max_height_units,
        params=params,
        num_days=height_grid.num_days,
    )

    faces = [ground_face(projector, height_grid.num_weeks, height_grid.num_days, style.ground)]

    for week_index, day_index in iter_quads(height_grid):
        shade = shade_quad(height_grid, palette, week_index, day_index)
        vertices = (
            projector.project(week_index, day_index, shade.h00),
            projector.project(week_index + 1, day_index, shade.h10),
            projector.project(week_index + 1, day_index + 1, shade.h11),
            projector.project(week_index, day_index + 1, shade.h01),
        )
        faces.append(Face(vertices, shade.color, FaceKind.TERRAIN))

    if height_grid.num_weeks >= 2:
        faces.extend(skirt_faces(height_grid, projector, palette.first.scaled(style.skirt_shade)))

    return DrawList(
        width=canvas_width,
        height=canvas_height,
        background=style.background,
        faces=tuple(faces),
    )
