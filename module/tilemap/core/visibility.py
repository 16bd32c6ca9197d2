"""Visibility gating for chart containers.

A VisibilityObserver reports when a container starts intersecting the
viewport. ViewportObserver computes that from geometry handed to it by the
host's layout/scroll source; ManualVisibilityObserver fires on demand and
is what tests drive. VisibilityGate turns either one into a one-shot latch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from loguru import logger

Callback = Callable[[], None]


class VisibilityObserver(Protocol):
    def on_became_visible(self, callback: Callback) -> None: ...

    def disconnect(self) -> None: ...


@dataclass(frozen=True)
class Rect:
    """Vertical extent of an element in page coordinates (px)."""

    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class Viewport:
    scroll_top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.scroll_top + self.height


def intersection_ratio(element: Rect, viewport: Viewport) -> float:
    """Visible fraction of *element*'s height, in [0, 1]."""
    if element.height <= 0:
        return 0.0
    overlap = min(element.bottom, viewport.bottom) - max(element.top, viewport.scroll_top)
    return max(0.0, min(1.0, overlap / element.height))


class ViewportObserver:
    """Intersection-backed observer with the default threshold.

    Any ratio above zero counts as visible. Callbacks fire on every update
    that finds the element visible, until ``disconnect()``.
    """

    def __init__(self, element: Rect) -> None:
        self.element = element
        self._callbacks: List[Callback] = []
        self._connected = True

    def on_became_visible(self, callback: Callback) -> None:
        self._callbacks.append(callback)

    def disconnect(self) -> None:
        self._connected = False
        self._callbacks.clear()

    def update(self, scroll_top: float, viewport_height: float) -> None:
        self.update_viewport(Viewport(scroll_top=scroll_top, height=viewport_height))

    def update_viewport(self, viewport: Viewport) -> None:
        if not self._connected:
            return
        ratio = intersection_ratio(self.element, viewport)
        if ratio > 0:
            for callback in list(self._callbacks):
                callback()


class ManualVisibilityObserver:
    """Observer fired explicitly with ``trigger()``."""

    def __init__(self) -> None:
        self._callbacks: List[Callback] = []
        self.connected = True

    def on_became_visible(self, callback: Callback) -> None:
        self._callbacks.append(callback)

    def disconnect(self) -> None:
        self.connected = False

    def trigger(self) -> None:
        if not self.connected:
            return
        for callback in list(self._callbacks):
            callback()


class VisibilityGate:
    """Latches ``is_visible`` the first time the observer reports visibility.

    The flag only ever goes from False to True. After latching, the
    observer is disconnected and further signals are ignored.
    """

    def __init__(self, observer: VisibilityObserver) -> None:
        self._observer = observer
        self._visible = False
        self._mounted = False
        self._subscribers: List[Callback] = []

    @property
    def is_visible(self) -> bool:
        return self._visible

    def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self._observer.on_became_visible(self._on_signal)

    def unmount(self) -> None:
        self._mounted = False
        self._subscribers.clear()
        self._observer.disconnect()

    def subscribe(self, callback: Callback) -> None:
        """Call *callback* once the gate opens (immediately if it already has)."""
        if self._visible:
            callback()
            return
        self._subscribers.append(callback)

    def _on_signal(self) -> None:
        if not self._mounted or self._visible:
            return
        self._visible = True
        self._observer.disconnect()
        logger.debug("Container became visible")
        subscribers, self._subscribers = self._subscribers, []
        for callback in subscribers:
            callback()
