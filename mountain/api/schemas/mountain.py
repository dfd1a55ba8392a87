from datetime import date

from pydantic import BaseModel
from pydantic import Field


class HeightDay(BaseModel):
    """Single day of the normalized height grid."""

    date: date
    weekday: int
    count: int
    height: float


class HeightWeek(BaseModel):
    """Week bucket containing ordered height cells."""

    days: list[HeightDay]


class HeightGridResponse(BaseModel):
    """Normalized heightfield for a contribution calendar."""

    username: str | None = None
    total: int
    max_count: int
    scale_mode: str
    weeks: list[HeightWeek]


class CalendarDay(BaseModel):
    date: date
    count: int = Field(ge=0)


class RenderRequest(BaseModel):
    """Calendar posted for rendering without GitHub access."""

    days: list[CalendarDay] = Field(max_length=3700)
    total: int | None = Field(default=None, ge=0)
    season: str | None = None
    scale: str | None = None
    palette: list[str] | None = None


class SceneCamera(BaseModel):
    fov: float
    near: float
    far: float
    position: tuple[float, float, float]
    look_at: tuple[float, float, float]


class SceneLighting(BaseModel):
    ambient_intensity: float
    directional_intensity: float
    directional_position: tuple[float, float, float]


class MountainSceneResponse(BaseModel):
    """Vertex and color buffers for a hosted 3D renderer."""

    season: str
    num_weeks: int
    num_days: int
    positions: list[float]
    colors: list[float]
    indices: list[int]
    face_colors: list[str]
    background: str
    camera: SceneCamera
    lighting: SceneLighting
