"""
Canvas view component for the Aquarium Simulator UI.

`PlotlyContext` implements the GraphicsContext drawing primitives as Plotly
layout shapes, so the same RenderAdapter that drives headless recording also
paints the Streamlit canvas:
  - circles and rects map to shape types "circle" / "rect"
  - lines map to "line"
  - filled polygons map to SVG "path" shapes
  - text maps to a layout annotation

The y axis is reversed so screen coordinates (origin top-left) read the same
as on the device.
"""

from typing import Optional, Sequence

import plotly.graph_objects as go

from aquarium.core.world import World
from aquarium.render.adapter import RenderAdapter
from aquarium.render.context import Point, Rect


# ---------------------------------------------------------------------------
# Plotly-backed graphics context
# ---------------------------------------------------------------------------

class PlotlyContext:
    """
    GraphicsContext that accumulates Plotly shapes and annotations.

    Attributes:
        shapes: Shape dicts in draw order (later shapes on top).
        annotations: Text annotations.
    """

    def __init__(self, line_width: float = 1.0):
        self.line_width = line_width
        self.shapes: list[dict] = []
        self.annotations: list[dict] = []
        self._fill = "#000000"
        self._stroke = "#000000"

    def set_fill_color(self, color: str) -> None:
        self._fill = color

    def set_stroke_color(self, color: str) -> None:
        self._stroke = color

    def _filled(self) -> dict:
        return dict(fillcolor=self._fill, line=dict(width=0))

    def _stroked(self) -> dict:
        return dict(line=dict(color=self._stroke, width=self.line_width))

    def fill_circle(self, center: Point, radius: int) -> None:
        x, y = center
        self.shapes.append(dict(type="circle", x0=x - radius, y0=y - radius,
                                x1=x + radius, y1=y + radius, **self._filled()))

    def draw_circle(self, center: Point, radius: int) -> None:
        x, y = center
        self.shapes.append(dict(type="circle", x0=x - radius, y0=y - radius,
                                x1=x + radius, y1=y + radius, **self._stroked()))

    def draw_line(self, p0: Point, p1: Point) -> None:
        self.shapes.append(dict(type="line", x0=p0[0], y0=p0[1],
                                x1=p1[0], y1=p1[1], **self._stroked()))

    def fill_rect(self, rect: Rect, corner_radius: int = 0) -> None:
        x, y, w, h = rect
        self.shapes.append(dict(type="rect", x0=x, y0=y, x1=x + w, y1=y + h,
                                layer="below", **self._filled()))

    def draw_rect(self, rect: Rect, corner_radius: int = 0) -> None:
        x, y, w, h = rect
        self.shapes.append(dict(type="rect", x0=x, y0=y, x1=x + w, y1=y + h,
                                **self._stroked()))

    def fill_path(self, points: Sequence[Point]) -> None:
        if len(points) < 3:
            return
        head, *rest = points
        path = f"M {head[0]},{head[1]} " + " ".join(f"L {x},{y}" for x, y in rest) + " Z"
        self.shapes.append(dict(type="path", path=path, **self._filled()))

    def draw_text(self, text: str, rect: Rect, font: str, alignment: str) -> None:
        x, y, w, h = rect
        anchor = {"left": (x, "left"), "center": (x + w / 2, "center")}.get(
            alignment, (x + w, "right")
        )
        self.annotations.append(dict(
            x=anchor[0], y=y + h / 2, text=text, showarrow=False,
            xanchor=anchor[1], yanchor="middle",
            font=dict(color=self._stroke, size=h - 2),
        ))


# ---------------------------------------------------------------------------
# Figure builder
# ---------------------------------------------------------------------------

def render_tank(
    world: World,
    charge_percent: Optional[int] = None,
    title: Optional[str] = None,
    scale: float = 3.0,
) -> go.Figure:
    """
    Render the current world state as a Plotly figure.

    Args:
        world: World to draw (read only).
        charge_percent: Battery reading for the status overlay (None = no overlay).
        title: Optional chart title.
        scale: Screen pixels per canvas pixel.

    Returns:
        Plotly figure.
    """
    ctx = PlotlyContext(line_width=max(1.0, scale / 2))
    adapter = RenderAdapter()
    adapter.draw(world, ctx)
    if charge_percent is not None:
        adapter.draw_status(ctx, world.width, charge_percent)

    if title is None:
        title = f"Aquarium ({world.width}×{world.height}) | Tick {world.tick_count}"

    fig = go.Figure()
    fig.update_layout(
        title=title,
        width=int(world.width * scale) + 40,
        height=int(world.height * scale) + 80,
        shapes=ctx.shapes,
        annotations=ctx.annotations,
        xaxis=dict(range=[0, world.width], visible=False, constrain="domain"),
        yaxis=dict(range=[world.height, 0], visible=False,
                   scaleanchor="x", scaleratio=1),
        template="plotly_white",
        showlegend=False,
        margin=dict(l=20, r=20, t=60, b=20),
    )
    return fig
