"""Immediate-mode UI building and naive layout into a scene of filled boxes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .layout import Alignment, Direction, Padding, Size
from .widget import Widget, WidgetClass

Bounds = tuple[float, float, float, float]
Color = tuple[int, int, int]


class Scene:
    """Filled rectangles, in drawing order, as ``((x0, y0, x1, y1), color)``."""

    def __init__(self) -> None:
        self.fills: list[tuple[Bounds, Color]] = []

    def fill(self, bounds: Bounds, color: Color) -> None:
        self.fills.append((tuple(bounds), color))

    def reset(self) -> None:
        self.fills.clear()


@dataclass
class _WidgetLayout:
    direction: Direction
    padding: Padding
    child_gap: int
    child_alignment: Alignment
    size: Size
    children: list[int] = field(default_factory=list)


@dataclass
class _WidgetRenderData:
    widget_class: WidgetClass


@dataclass
class _OpenWidget:
    index: int
    children: list[int] = field(default_factory=list)


class UiContext:
    """Collects a widget tree and lays it out into ``scene``."""

    def __init__(self) -> None:
        self._layouts: list[_WidgetLayout] = []
        self._render_data: list[_WidgetRenderData] = []
        self._open_stack: list[_OpenWidget] = []
        self.scene = Scene()

    def set_ui(self, build: Callable[[UiContext], object]) -> None:
        """Replace the UI with what ``build`` adds, then lay it out."""
        self._reset()
        build(self)
        self._compute_layout()

    def add(self, widget: Widget) -> None:
        self.add_parent(widget, lambda ui: None)

    def add_parent(self, widget: Widget, add_children: Callable[[UiContext], object]) -> None:
        """Add ``widget`` with the children that ``add_children`` adds."""
        self._open_widget(widget)
        add_children(self)
        self._close_widget()

    def _reset(self) -> None:
        self.scene.reset()
        self._layouts.clear()
        self._render_data.clear()
        self._open_stack.clear()

    def _open_widget(self, widget: Widget) -> None:
        self._layouts.append(
            _WidgetLayout(
                direction=widget.direction,
                padding=widget.padding,
                child_gap=widget.child_gap,
                child_alignment=widget.child_alignment,
                size=widget.size,
            )
        )
        self._render_data.append(_WidgetRenderData(widget.widget_class))
        index = len(self._layouts) - 1
        if self._open_stack:
            self._open_stack[-1].children.append(index)
        self._open_stack.append(_OpenWidget(index))

    def _close_widget(self) -> None:
        closed = self._open_stack.pop()
        self._layouts[closed.index].children = closed.children

    def _compute_layout(self) -> None:
        if not self._layouts:
            return
        stack: list[tuple[int, float, float]] = [(0, 0.0, 0.0)]
        while stack:
            index, x, y = stack.pop()
            layout = self._layouts[index]
            width, height = layout.size.naive_size()
            self.scene.fill(
                (x, y, x + width, y + height),
                self._render_data[index].widget_class.color(),
            )

            offset_x = float(layout.padding.left)
            offset_y = float(layout.padding.top)
            gap = float(layout.child_gap)
            placed = []
            for child_index in layout.children:
                child_width, child_height = self._layouts[child_index].size.naive_size()
                placed.append((child_index, x + offset_x, y + offset_y))
                if layout.direction is Direction.LEFT_TO_RIGHT:
                    offset_x += child_width + gap
                else:
                    offset_y += child_height + gap
            stack.extend(reversed(placed))