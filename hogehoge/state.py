"""Observable values for widgets: one provider, many subscribers."""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")


class _Channel(Generic[T]):
    def __init__(self, value: T) -> None:
        self.value = value
        self.version = 0
        self.lock = threading.Lock()


class ValueProvider(Generic[T]):
    """Holds the current value and tells subscribers when it changes."""

    def __init__(self, value: T) -> None:
        self._channel = _Channel(value)

    def subscribe(self) -> SubscribedValue[T]:
        """A new subscriber that has already seen the current value."""
        return SubscribedValue(self._channel)

    def set(self, value: T) -> None:
        with self._channel.lock:
            self._channel.value = value
            self._channel.version += 1

    def get(self) -> T:
        return self._channel.value

    def modify(self, func: Callable[[T], object]) -> None:
        """Mutate the value in place with ``func`` and notify subscribers."""
        with self._channel.lock:
            func(self._channel.value)
            self._channel.version += 1


class SubscribedValue(Generic[T]):
    """A subscriber's view of a provider's value."""

    def __init__(self, channel: _Channel[T]) -> None:
        self._channel = channel
        self._seen = channel.version

    def is_dirty(self) -> bool:
        """Whether the value changed since this subscriber last read it."""
        return self._channel.version != self._seen

    def get_and_reset(self) -> T:
        with self._channel.lock:
            self._seen = self._channel.version
            return self._channel.value


class WidgetValue(Generic[T]):
    """Either a fixed value or one that follows a provider."""

    def __init__(self, source: Union[T, SubscribedValue[T]]) -> None:
        self.source = source

    @property
    def subscribed(self) -> bool:
        return isinstance(self.source, SubscribedValue)

    def is_dirty(self) -> bool:
        if isinstance(self.source, SubscribedValue):
            return self.source.is_dirty()
        return False

    def access_and_reset(self, func: Callable[[T], R]) -> R:
        """Call ``func`` with the current value, marking it as seen."""
        if isinstance(self.source, SubscribedValue):
            return func(self.source.get_and_reset())
        return func(self.source)

    def __repr__(self) -> str:
        kind = "Subscribed" if self.subscribed else "Fixed"
        return f"WidgetValue.{kind}({self.source!r})"