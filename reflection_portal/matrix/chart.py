"""Payoff matrix chart — SVG view model and standalone rendering."""

from jinja2 import Environment, FileSystemLoader, select_autoescape

from reflection_portal.config import WEB_TEMPLATES_DIR
from reflection_portal.matrix.coordinates import CHART_SIZE, PADDING, CoordinateMapper
from reflection_portal.matrix.layout import CHAR_WIDTH, layout_for
from reflection_portal.matrix.quadrants import Q1, Q2, Q3, Q4
from reflection_portal.matrix.scale import ScaleConfig, format_tick

CHART_TEMPLATE = "curriculum/_chart.svg"
DOWNLOAD_FILENAME = "curriculum_payoff_matrix.svg"

_MID_LINE = {"stroke": "#374151", "width": 3, "dash": "0"}
_GRID_LINE = {"stroke": "#e5e7eb", "width": 1, "dash": "4 4"}

_env = Environment(
    loader=FileSystemLoader(str(WEB_TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "svg"]),
)


def build_chart(points, scale: ScaleConfig) -> dict:
    """Everything the SVG template needs, in canvas coordinates."""
    mapper = CoordinateMapper(scale)
    size = CHART_SIZE
    pad = PADDING
    half = mapper.plot_size / 2
    mid_x, mid_y = mapper.mid_x, mapper.mid_y

    backgrounds = [
        {"x": mid_x, "y": pad, "fill": Q1["background"]},
        {"x": pad, "y": pad, "fill": Q2["background"]},
        {"x": mid_x, "y": mid_y, "fill": Q3["background"]},
        {"x": pad, "y": mid_y, "fill": Q4["background"]},
    ]

    grid = []
    for tick in scale.ticks():
        style = _MID_LINE if scale.is_midpoint(tick) else _GRID_LINE
        grid.append({
            "label": format_tick(tick),
            "x": mapper.x(tick),
            "y": mapper.y(tick),
            **style,
        })

    watermarks = [
        {"x": size - pad - 30, "y": pad + 50, "anchor": "end", "quadrant": Q1},
        {"x": pad + 30, "y": pad + 50, "anchor": "start", "quadrant": Q2},
        {"x": size - pad - 30, "y": size - pad - 30, "anchor": "end", "quadrant": Q3},
        {"x": pad + 30, "y": size - pad - 30, "anchor": "start", "quadrant": Q4},
    ]

    nodes = []
    for node in layout_for(points, scale):
        text_len = len(node.point.activity)
        nodes.append({
            "id": node.point.id,
            "activity": node.point.activity,
            "x": node.x,
            "y": node.y,
            "lx": node.lx,
            "ly": node.ly,
            "color": node.quadrant["point_color"],
            "code": node.quadrant["code"],
            "box_x": node.lx - text_len * CHAR_WIDTH / 2 - 5,
            "box_y": node.ly - 18,
            "box_width": text_len * CHAR_WIDTH + 10,
        })

    return {
        "size": size,
        "padding": pad,
        "half": half,
        "backgrounds": backgrounds,
        "grid": grid,
        "watermarks": watermarks,
        "nodes": nodes,
    }


def render_svg(points, scale: ScaleConfig) -> str:
    """Standalone SVG document for download."""
    template = _env.get_template(CHART_TEMPLATE)
    return template.render(chart=build_chart(points, scale), standalone=True)
