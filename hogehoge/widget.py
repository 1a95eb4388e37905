"""Widget descriptions: layout, look, content and events."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .layout import Alignment, Direction, Padding, Size
from .state import WidgetValue


class WidgetClass(enum.Enum):
    SURFACE = "surface"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"

    def color(self) -> tuple[int, int, int]:
        """The fill colour as an RGB triple."""
        return _CLASS_COLORS[self]


_CLASS_COLORS = {
    WidgetClass.SURFACE: (0xF0, 0xF0, 0xF0),
    WidgetClass.PRIMARY: (0x00, 0x80, 0xFF),
    WidgetClass.SECONDARY: (0xFF, 0xA5, 0x00),
    WidgetClass.TERTIARY: (0x90, 0x90, 0x90),
}


class TextRole(enum.Enum):
    NORMAL = "normal"
    TITLE = "title"
    SUBTITLE = "subtitle"
    CAPTION = "caption"


@dataclass
class WidgetContent:
    """What a widget shows; no text means it shows nothing."""

    text: WidgetValue[str] | None = None
    role: TextRole = TextRole.NORMAL

    @property
    def is_empty(self) -> bool:
        return self.text is None


class EventKind(enum.Enum):
    CLICK = "click"
    HOVER = "hover"


@dataclass(frozen=True)
class Event:
    id: int
    kind: EventKind


@dataclass
class EventAction:
    """Sends an event with ``id`` to ``sender`` (anything with ``put``)."""

    id: int = 0
    sender: Any = None

    def fire(self, kind: EventKind) -> bool:
        """Send an event if there is a sender; report whether one was sent."""
        if self.sender is None:
            return False
        self.sender.put(Event(self.id, kind))
        return True


@dataclass
class Widget:
    # layout
    direction: Direction = Direction.LEFT_TO_RIGHT
    padding: Padding = field(default_factory=Padding)
    child_gap: int = 0
    child_alignment: Alignment = Alignment.START
    size: Size = field(default_factory=Size)

    # visual
    widget_class: WidgetClass = WidgetClass.SURFACE
    content: WidgetContent = field(default_factory=WidgetContent)
    clip: bool = False

    # events
    on_hover: EventAction = field(default_factory=EventAction)
    on_click: EventAction = field(default_factory=EventAction)