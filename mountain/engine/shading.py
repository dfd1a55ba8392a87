from mountain.engine.palette import Color

BASE_BRIGHTNESS = 1.0
DAY_SLOPE_WEIGHT = 0.5
WEEK_SLOPE_WEIGHT = 0.3
MIN_BRIGHTNESS = 0.4
MAX_BRIGHTNESS = 1.6


def shade_factor(h00: float, h10: float, h01: float) -> float:
    """Approximate directional lighting from a face's two edge slopes.

    The light is assumed to come from the upper back right: faces rising
    along the day axis get brighter, faces rising along the week axis get
    darker. This is a cheap stand-in for a normal/light dot product.
    """

    slope_week = h10 - h00
    slope_day = h01 - h00
    brightness = BASE_BRIGHTNESS + DAY_SLOPE_WEIGHT * slope_day - WEEK_SLOPE_WEIGHT * slope_week
    return max(MIN_BRIGHTNESS, min(MAX_BRIGHTNESS, brightness))


def apply_shading(color: Color, factor: float) -> Color:
    return color.scaled(factor)
