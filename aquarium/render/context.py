"""
Graphics context contract for the render adapter.

The engine decides *what* to draw; a GraphicsContext decides how pixels (or
plot shapes) are produced. `RecordingContext` keeps every call as a
`DrawCall`, which is what tests and headless runs inspect.

Points are (x, y) tuples; rects are (x, y, w, h) tuples; colors are
"#rrggbb" strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

Point = tuple[int, int]
Rect = tuple[int, int, int, int]


class GraphicsContext(Protocol):
    """Primitive drawing operations with fill and stroke color state."""

    def set_fill_color(self, color: str) -> None: ...

    def set_stroke_color(self, color: str) -> None: ...

    def fill_circle(self, center: Point, radius: int) -> None: ...

    def draw_circle(self, center: Point, radius: int) -> None: ...

    def draw_line(self, p0: Point, p1: Point) -> None: ...

    def fill_rect(self, rect: Rect, corner_radius: int = 0) -> None: ...

    def draw_rect(self, rect: Rect, corner_radius: int = 0) -> None: ...

    def fill_path(self, points: Sequence[Point]) -> None: ...

    def draw_text(self, text: str, rect: Rect, font: str, alignment: str) -> None: ...


@dataclass(frozen=True)
class DrawCall:
    """One recorded primitive with the color it was drawn in."""
    op: str
    args: tuple
    color: Optional[str]


class RecordingContext:
    """
    GraphicsContext that records calls instead of drawing.

    Attributes:
        calls: Every primitive in call order.
        fill_color: Current fill color.
        stroke_color: Current stroke color.
    """

    def __init__(self):
        self.calls: list[DrawCall] = []
        self.fill_color: Optional[str] = None
        self.stroke_color: Optional[str] = None

    def set_fill_color(self, color: str) -> None:
        self.fill_color = color

    def set_stroke_color(self, color: str) -> None:
        self.stroke_color = color

    def fill_circle(self, center: Point, radius: int) -> None:
        self.calls.append(DrawCall("fill_circle", (center, radius), self.fill_color))

    def draw_circle(self, center: Point, radius: int) -> None:
        self.calls.append(DrawCall("draw_circle", (center, radius), self.stroke_color))

    def draw_line(self, p0: Point, p1: Point) -> None:
        self.calls.append(DrawCall("draw_line", (p0, p1), self.stroke_color))

    def fill_rect(self, rect: Rect, corner_radius: int = 0) -> None:
        self.calls.append(DrawCall("fill_rect", (rect, corner_radius), self.fill_color))

    def draw_rect(self, rect: Rect, corner_radius: int = 0) -> None:
        self.calls.append(DrawCall("draw_rect", (rect, corner_radius), self.stroke_color))

    def fill_path(self, points: Sequence[Point]) -> None:
        self.calls.append(DrawCall("fill_path", (tuple(points),), self.fill_color))

    def draw_text(self, text: str, rect: Rect, font: str, alignment: str) -> None:
        self.calls.append(DrawCall("draw_text", (text, rect, font, alignment), self.stroke_color))

    def ops(self) -> list[str]:
        return [c.op for c in self.calls]

    def count(self, op: str, color: Optional[str] = None) -> int:
        """Number of recorded calls of one op, optionally restricted to a color."""
        return sum(
            1 for c in self.calls
            if c.op == op and (color is None or c.color == color)
        )

    def clear(self) -> None:
        self.calls.clear()
