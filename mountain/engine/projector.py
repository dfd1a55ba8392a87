from dataclasses import dataclass

from mountain.engine.models import NUM_DAYS


@dataclass(frozen=True)
class ProjectionParams:
    """Visual tuning values for the fixed oblique camera.

    `skew`, `week_rise` and `day_rise` are the k1, k2 and k3 factors of the
    projection. None of these are correctness constraints.
    """

    skew: float = 0.9
    week_rise: float = 0.25
    day_rise: float = 0.5
    grid_fill: float = 0.9
    depth_ratio: float = 0.45
    height_divisor: float = 80.0
    center_x_fraction: float = 0.5
    center_y_fraction: float = 0.65


@dataclass(frozen=True)
class ProjectedVertex:
    x: float
    y: float


class Projector:
    """Affine oblique projection from grid space to canvas coordinates."""

    def __init__(
        self,
        num_weeks: int,
        canvas_width: float,
        canvas_height: float,
        max_height_units: float,
        params: ProjectionParams = ProjectionParams(),
        num_days: int = NUM_DAYS,
    ) -> None:
        self.num_weeks = num_weeks
        self.num_days = num_days
        self.params = params

        scale = min(canvas_width, canvas_height) * params.grid_fill
        self.spacing_x = scale / max(1, num_weeks)
        self.spacing_z = scale * params.depth_ratio / max(1, num_days)
        self.max_height_scaled = max_height_units * (scale / params.height_divisor)
        self.center_x = canvas_width * params.center_x_fraction
        self.center_y = canvas_height * params.center_y_fraction

    def project(self, week_index: float, day_index: float, height: float) -> ProjectedVertex:
        """Project a (week, day, height) grid point onto the canvas."""

        x = (week_index - self.num_weeks / 2) * self.spacing_x
        z = (day_index - self.num_days / 2) * self.spacing_z
        params = self.params

        screen_x = self.center_x + (x - z * params.skew)
        screen_y = (
            self.center_y
            + (x * params.week_rise + z * params.day_rise)
            - height * self.max_height_scaled
        )
        return ProjectedVertex(screen_x, screen_y)
