from mountain.engine.emitter import DrawList
from mountain.engine.emitter import Face
from mountain.engine.emitter import FaceKind

STROKE_WIDTH = 0.3

SHADOW_FILTER = """  <defs>
    <filter id="shadow" x="-20%" y="-20%" width="140%" height="140%">
      <feGaussianBlur in="SourceAlpha" stdDeviation="2" />
      <feOffset dx="1" dy="1" result="offsetblur" />
      <feComponentTransfer>
        <feFuncA type="linear" slope="0.3" />
      </feComponentTransfer>
      <feMerge>
        <feMergeNode />
        <feMergeNode in="SourceGraphic" />
      </feMerge>
    </filter>
  </defs>
"""


def format_number(value: float) -> str:
    return f"{value:.2f}"


def format_dimension(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return format_number(value)


def format_points(face: Face) -> str:
    return " ".join(
        f"{format_number(vertex.x)},{format_number(vertex.y)}" for vertex in face.vertices
    )


def render_polygon(face: Face) -> str:
    fill = face.color.to_hex()
    if face.kind is FaceKind.GROUND:
        return f'  <polygon points="{format_points(face)}" fill="{fill}" />\n'
    return (
        f'  <polygon points="{format_points(face)}" fill="{fill}" '
        f'stroke="{fill}" stroke-width="{STROKE_WIDTH}" />\n'
    )


def render_svg(draw_list: DrawList) -> str:
    """Serialize a draw list to SVG, one polygon per face in draw order."""

    width = format_dimension(draw_list.width)
    height = format_dimension(draw_list.height)
    parts = [
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        'xmlns="http://www.w3.org/2000/svg">\n',
        SHADOW_FILTER,
        f'  <rect width="100%" height="100%" fill="{draw_list.background.to_hex()}" />\n',
    ]
    parts.extend(render_polygon(face) for face in draw_list.faces)
    parts.append("</svg>\n")
    return "".join(parts)
