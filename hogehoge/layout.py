"""Layout parameters of widgets: direction, padding, alignment and sizing."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import ClassVar

U16_MAX = 0xFFFF


def _check_u16(name: str, value: int) -> None:
    if not 0 <= value <= U16_MAX:
        raise ValueError(f"{name} must be within 0..{U16_MAX}, got {value}")


class Direction(enum.IntEnum):
    LEFT_TO_RIGHT = 0
    TOP_TO_BOTTOM = 1


@dataclass(frozen=True)
class Padding:
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            _check_u16(f.name, getattr(self, f.name))

    @classmethod
    def all(cls, value: int) -> Padding:
        """The same padding on every side."""
        return cls(value, value, value, value)


class Alignment(enum.IntEnum):
    START = 0
    CENTER = 1
    END = 2


@dataclass(frozen=True)
class ChildAlignment:
    horizontal: Alignment = Alignment.START
    vertical: Alignment = Alignment.START


class SizeKind(enum.Enum):
    FIT = "fit"
    GROW = "grow"


@dataclass(frozen=True)
class SizeAxis:
    FILL: ClassVar[SizeAxis]
    FIT: ClassVar[SizeAxis]

    min: int = 0
    max: int = U16_MAX
    kind: SizeKind = SizeKind.FIT

    def __post_init__(self) -> None:
        _check_u16("min", self.min)
        _check_u16("max", self.max)

    @classmethod
    def fixed(cls, value: int) -> SizeAxis:
        """An axis of exactly ``value``."""
        return cls(value, value, SizeKind.FIT)


SizeAxis.FILL = SizeAxis(0, U16_MAX, SizeKind.GROW)
SizeAxis.FIT = SizeAxis(0, U16_MAX, SizeKind.FIT)


@dataclass(frozen=True)
class Size:
    FILL: ClassVar[Size]
    FIT: ClassVar[Size]

    width: SizeAxis = field(default_factory=SizeAxis)
    height: SizeAxis = field(default_factory=SizeAxis)

    @classmethod
    def fixed(cls, width: int, height: int) -> Size:
        return cls(SizeAxis.fixed(width), SizeAxis.fixed(height))

    def naive_size(self) -> tuple[float, float]:
        """The minimum width and height, used until real sizing exists."""
        return float(self.width.min), float(self.height.min)


Size.FILL = Size(SizeAxis.FILL, SizeAxis.FILL)
Size.FIT = Size(SizeAxis.FIT, SizeAxis.FIT)